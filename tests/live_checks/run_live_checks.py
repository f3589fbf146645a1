#!/usr/bin/env python3
"""
Live checks against the real text-generation agents (needs OPENAI_API_KEY).

Usage:
    python -m tests.live_checks.run_live_checks                            # run all scenarios
    python -m tests.live_checks.run_live_checks --scenario healthy_adult   # run one scenario
    python -m tests.live_checks.run_live_checks --list                     # list available scenarios
"""

import sys
import asyncio
import argparse
import logging

from readmission.collaborators import AgentCollaborators
from readmission.config import LOG_LEVEL

from tests.live_checks.scenarios import SCENARIOS
from tests.live_checks.runner import run_scenario


async def main():
    parser = argparse.ArgumentParser(description="Live readmission assessment checks")
    parser.add_argument("--scenario", type=str, help="Run a specific scenario by name")
    parser.add_argument("--list", action="store_true", help="List all available scenarios")
    args = parser.parse_args()

    logging.basicConfig(level=LOG_LEVEL)

    if args.list:
        for s in SCENARIOS:
            expect = s.get("expect", {})
            print(f"  {s['name']:25s}  [{expect.get('risk_level', '?'):4s}]  emergency={expect.get('is_emergency')}")
        return 0

    collaborators = AgentCollaborators()

    if args.scenario:
        scenarios = [s for s in SCENARIOS if s["name"] == args.scenario]
        if not scenarios:
            print(f"Unknown scenario: {args.scenario}")
            print("Use --list to see available scenarios")
            return 1
    else:
        scenarios = SCENARIOS

    # Run scenarios sequentially (each makes several model calls)
    results = []
    for scenario in scenarios:
        print(f"  Running {scenario['name']}...", end=" ", flush=True)
        result = await run_scenario(collaborators, scenario)
        detail = f" — {result.get('reason', '')}" if result["status"] != "PASS" else ""
        print(f"{result['status']}{detail}", flush=True)
        results.append(result)

    # Summary
    passed = sum(1 for r in results if r["status"] == "PASS")
    failed = len(results) - passed
    print(f"\n{'='*60}")
    print(f"RESULTS: {passed}/{len(results)} passed")
    print(f"{'='*60}")

    if failed:
        print(f"\nFailed scenarios:")
        for r in results:
            if r["status"] != "PASS":
                print(f"  {r['status']}: {r['name']} — {r.get('reason', 'unknown')}")
                if r.get("output"):
                    print(f"    Output: {r['output']}")

    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
