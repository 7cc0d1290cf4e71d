#!/usr/bin/env python3
"""Run the sequential task processor."""

import sys

from blogsync.core.db import init_db
from blogsync.core.logging import setup_logging
from blogsync.pipeline.sequential_task_processor import SequentialTaskProcessor


def main():
    """Main entry point."""
    max_tasks = int(sys.argv[1]) if len(sys.argv) > 1 else None

    setup_logging()
    init_db()

    print("Starting sequential task processor...")
    if max_tasks:
        print(f"Will process up to {max_tasks} tasks")
    print("Press Ctrl+C to stop")

    processor = SequentialTaskProcessor()
    processor.run(max_tasks=max_tasks)


if __name__ == "__main__":
    main()
