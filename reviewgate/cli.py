import argparse
import json
import sys
from dataclasses import replace

from reviewgate import __version__
from reviewgate.errors import ReviewGateError
from reviewgate.logging_config import configure_logging


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="reviewgate")
    sub = p.add_subparsers(dest="cmd", required=True)

    run_p = sub.add_parser("run", help="Gate the pull request of the current workflow event.")
    run_p.add_argument("--config", help="Path to the review policy yaml (overrides INPUT_CONFIG-FILE)")
    run_p.add_argument("--token", help="GitHub token (optional, else uses INPUT_TOKEN/GITHUB_TOKEN env)")

    eval_p = sub.add_parser("evaluate", help="Evaluate a policy against a saved review snapshot.")
    eval_p.add_argument("--config", required=True, help="Path to the review policy yaml")
    eval_p.add_argument("--snapshot", required=True, help="Path to a review snapshot json")
    eval_p.add_argument("--format", default="text", choices=["text", "json"])

    validate_p = sub.add_parser("validate-config", help="Validate a review policy file.")
    validate_p.add_argument("--config", required=True, help="Path to the review policy yaml")
    validate_p.add_argument("--format", default="text", choices=["text", "json"])

    sub.add_parser("version", help="Print version.")
    return p


def _run(args) -> int:
    from reviewgate.config import load_settings
    from reviewgate.integrations.github.client import GitHubGateway
    from reviewgate.runner import run_gatekeeper

    settings = load_settings()
    if args.token:
        settings = replace(settings, token=args.token)
    if args.config:
        settings = replace(settings, config_file=args.config)
    try:
        gateway = GitHubGateway.from_settings(settings)
    except ReviewGateError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return run_gatekeeper(settings, gateway)


def _evaluate(args) -> int:
    from reviewgate.engine import ReviewGatekeeper
    from reviewgate.policy.loader import load_policy
    from reviewgate.reporting import render_text, verdict_to_dict
    from reviewgate.signals.reviews.snapshot_file import load_snapshot_file

    try:
        policy = load_policy(args.config)
        snapshot = load_snapshot_file(args.snapshot)
        verdict = ReviewGatekeeper(policy, snapshot).check_satisfied()
    except ReviewGateError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.format == "json":
        print(json.dumps(verdict_to_dict(verdict), indent=2))
    else:
        print(render_text(verdict))
    return 0 if verdict.satisfied else 1


def _validate_config(args) -> int:
    from reviewgate.policy.loader import validate_policy_file

    report = validate_policy_file(args.config)
    if args.format == "json":
        print(json.dumps(report, indent=2))
    else:
        print(f"{report['status']}: {args.config} ({report['group_count']} group(s))")
        for issue in report["issues"]:
            location = f" [{issue['location']}]" if issue.get("location") else ""
            print(f"  {issue['severity']} {issue['code']}{location}: {issue['message']}")
    return 0 if report["ok"] else 1


def main() -> int:
    # If no arguments provided, show help
    if len(sys.argv) == 1:
        sys.argv.append("--help")

    p = build_parser()
    args = p.parse_args()
    configure_logging()

    if args.cmd == "version":
        print(f"reviewgate {__version__}")
        return 0
    if args.cmd == "run":
        return _run(args)
    if args.cmd == "evaluate":
        return _evaluate(args)
    if args.cmd == "validate-config":
        return _validate_config(args)
    return 2


if __name__ == "__main__":
    sys.exit(main())
