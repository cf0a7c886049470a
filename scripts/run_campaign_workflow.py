import argparse
import os
import sys
from dotenv import load_dotenv

# Add src to path to allow for imports
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from campaign_inbox import _LOG_PATH
from campaign_inbox.workflow import run_workflow


def main(argv=None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Run the campaign email workflow once and print its report.")
    parser.add_argument("--thread-id", help="Checkpoint thread to resume; a new one is created when omitted.")
    parser.add_argument("--timezone", help="Timezone for today's date in the agent prompt (default: America/Phoenix).")
    parser.add_argument("--max-steps", type=int, help="Maximum LLM turns for the agent (default: 20).")
    args = parser.parse_args(argv)

    result = run_workflow(
        thread_id=args.thread_id,
        timezone=args.timezone,
        max_steps=args.max_steps,
    )
    print(result["summary"])
    print(f"Completed at {result['completed_at']} (log: {_LOG_PATH})")
    return 0 if result["overall_success"] else 1


if __name__ == "__main__":
    sys.exit(main())
