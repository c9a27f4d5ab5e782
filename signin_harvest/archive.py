#!/usr/bin/env python3
"""
Harvested Cookie Persistence
"""

import json
import gzip
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

from .cookie_store import Cookie
from .utils import extract_domain, sanitize_site_id

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = "_cookies.json.gz"

class CookieArchive:
    """Stores one gzip JSON cookie snapshot per site"""

    def __init__(self, cache_dir: Path = None):
        self.cache_dir = Path(cache_dir) if cache_dir else Path.cwd() / 'cache'
        self.archive_dir = self.cache_dir / 'cookie_archives'
        self.archive_dir.mkdir(parents=True, exist_ok=True)

    def _get_archive_file(self, site_url: str) -> Path:
        """Get archive file path for site"""
        return self.archive_dir / f"{sanitize_site_id(site_url)}{ARCHIVE_SUFFIX}"

    def save(self, site_url: str, cookies: Iterable[Cookie]) -> Path:
        """Write a site's cookie snapshot, replacing any earlier one"""
        archive_file = self._get_archive_file(site_url)
        payload = {
            'site_url': site_url,
            'saved_at': datetime.now().isoformat(),
            'cookies': [cookie.to_dict() for cookie in cookies]
        }

        with gzip.open(archive_file, 'wt', encoding='utf-8') as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)

        logger.info(f"Archived {len(payload['cookies'])} cookies for {extract_domain(site_url)}")
        return archive_file

    def load(self, site_url: str) -> Optional[Tuple[Cookie, ...]]:
        """Load a site's cookie snapshot; None when missing or unreadable"""
        archive_file = self._get_archive_file(site_url)

        if not archive_file.exists():
            return None

        try:
            with gzip.open(archive_file, 'rt', encoding='utf-8') as f:
                payload = json.load(f)
            return tuple(Cookie.from_dict(item) for item in payload['cookies'])
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Failed to load cookie archive {archive_file.name}: {e}")
            # Remove corrupted archive
            archive_file.unlink(missing_ok=True)
            return None

    def delete(self, site_url: str):
        """Delete a site's archive"""
        self._get_archive_file(site_url).unlink(missing_ok=True)

    def list_archives(self) -> Dict[str, Dict[str, Any]]:
        """List all archives with metadata"""
        archives = {}

        for archive_file in self.archive_dir.glob(f"*{ARCHIVE_SUFFIX}"):
            try:
                with gzip.open(archive_file, 'rt', encoding='utf-8') as f:
                    payload = json.load(f)
                site_url = payload['site_url']
                domain = extract_domain(site_url)
                info = {
                    'site_url': site_url,
                    'saved_at': payload.get('saved_at'),
                    'cookie_count': len(payload.get('cookies', []))
                }
            except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Removing unreadable cookie archive {archive_file.name}: {e}")
                archive_file.unlink(missing_ok=True)
                continue

            archives[domain] = info

        return archives
