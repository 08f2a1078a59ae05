"""Module entrypoint.

Allows:
    python -m nginx_log_stats
"""

from __future__ import annotations

from nginx_log_stats.cli import main

if __name__ == "__main__":
    main()
