#!/usr/bin/env python3
"""
FinCore Ledger Entry Point

Starts the interactive text-menu banking app.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from fincore.cli import main


if __name__ == "__main__":
    print("🏦 Starting FinCore Ledger...")
    print("💰 All balances use Decimal precision")
    print("🔒 Every balance operation is session-checked")
    print()

    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n👋 Shutting down FinCore Ledger...")
    except Exception as e:
        print(f"❌ Error starting ledger: {e}")
        sys.exit(1)
