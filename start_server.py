#!/usr/bin/env python3
"""Start the dashboard API behind a proxy, honouring the PORT environment variable."""

import logging
import os
import sys
from pathlib import Path

import uvicorn


def main() -> int:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    port = os.environ.get("PORT", "8000")
    try:
        port_int = int(port)
    except ValueError:
        logging.warning(f"Invalid PORT value '{port}', using default 8000")
        port_int = 8000

    # Allow running from a checkout without installing the package
    src_path = Path(__file__).resolve().parent / "src"
    if src_path.is_dir() and str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))

    logging.info(f"Starting server on port {port_int}...")
    uvicorn.run(
        "shipdash.main:app",
        host="0.0.0.0",
        port=port_int,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
