from __future__ import annotations

"""
Main Entry Point.

Routes execution to the CLI demo and converts unexpected crashes into a
stderr report plus a non-zero exit code.
"""

import os
import sys
import traceback

# -----------------------------------------------------------------------------
# ENVIRONMENT INITIALIZATION
# -----------------------------------------------------------------------------

# Path visibility when executed as a plain script
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
if not getattr(sys, "frozen", False):
    SRC_DIR = os.path.dirname(BASE_DIR)
    if SRC_DIR not in sys.path:
        sys.path.insert(0, SRC_DIR)


# -----------------------------------------------------------------------------
# EXECUTION ROUTING
# -----------------------------------------------------------------------------

def main() -> int:
    """
    Run the CLI demo.

    Returns:
        int: Standard process exit code (0: Success, 1: Error).
    """
    try:
        from rdebug.interface.cli.app import main as cli_main
        return cli_main()
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130
    except Exception:
        print("=" * 80, file=sys.stderr)
        print("CRITICAL ERROR (RDEBUG DEMO)", file=sys.stderr)
        print("=" * 80, file=sys.stderr)
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
