from __future__ import annotations

from backup_and_sync.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
