import argparse
import asyncio
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from runner import metrics
from runner.config import RunnerOptions
from runner.logger import log
from runner.session_runner import SessionRunner
from runner.views import EXIT_CODES, TaskResult, TaskStatus
from tasks import TASKS

# Load environment variables
load_dotenv()


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run a Playwright demo alongside the Playwright MCP helper process"
    )
    parser.add_argument("demo", choices=sorted(TASKS), help="Demo to run")
    parser.add_argument("--headless", action="store_true", default=None, help="Run the browser headless")
    parser.add_argument("--warmup", type=float, help="Seconds to wait after starting the helper")
    parser.add_argument("--linger", type=float, help="Seconds to keep the browser open after the task")
    parser.add_argument("--timeout", type=float, help="Upper bound in seconds for the task body")
    parser.add_argument("--ready-port", type=int, help="Poll this port instead of a fixed warm-up wait")
    parser.add_argument("--helper", help='Helper command line (default "npx @playwright/mcp")')
    parser.add_argument("--browser", choices=["chromium", "firefox", "webkit"], help="Browser engine")
    return parser.parse_args(argv)


def build_options(args: argparse.Namespace) -> RunnerOptions:
    return RunnerOptions.from_env(
        headless=args.headless,
        warmup_delay=args.warmup,
        linger_delay=args.linger,
        task_timeout=args.timeout,
        helper_ready_port=args.ready_port,
        helper_command=args.helper,
        browser_type=args.browser,
    )


async def run_demo(name: str, options: RunnerOptions) -> TaskResult:
    log("INFO", "demo_start", f"Starting Playwright MCP {name} demo")
    result = await SessionRunner(options).run(TASKS[name], name=name)
    log("INFO", "demo_finished", "Demo finished.", status=result.status.value)
    return result


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    try:
        options = build_options(args)
    except (ValidationError, ValueError) as e:
        log("ERROR", "config_invalid", "Invalid runner configuration", error=str(e))
        return EXIT_CODES[TaskStatus.SETUP_FAILED]

    metrics_port = os.getenv("RUNNER_METRICS_PORT")
    if metrics_port:
        try:
            metrics.start_metrics_server(int(metrics_port))
        except Exception as e:
            log("WARN", "metrics_start_failed", "Could not start Prometheus metrics server; continuing without metrics", error=str(e))

    try:
        result = asyncio.run(run_demo(args.demo, options))
    except KeyboardInterrupt:
        print("\n🛑 Execution stopped by user.")
        return 130
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
