#!/usr/bin/env python3
"""
Post-SSG step: rewrite every <loc> in the generated sitemap.xml so the
path ends with a trailing slash and no query string or fragment remains.

Exits 0 when the sitemap does not exist, so local builds without SSG
credentials still pass.

Usage:
    python scripts/patch_sitemap.py [--path dist/spa/sitemap.xml]
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog

from lawsite.core.config import settings
from lawsite.core.logging import configure_script_logging
from lawsite.services.sitemap import patch_sitemap_file

configure_script_logging()
logger = structlog.get_logger()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Normalize sitemap <loc> URLs")
    parser.add_argument("--path", type=Path, default=Path(settings.sitemap_path),
                        help="Path to sitemap.xml")
    args = parser.parse_args()

    patch_sitemap_file(args.path)
