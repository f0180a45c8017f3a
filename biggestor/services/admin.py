"""Administração do sistema: licenças de cadastro e relatos de bugs

Ambos ficam sob o dono system_data. Falhas de gravação (StorageWriteError)
são propagadas ao chamador.
"""

from __future__ import annotations

import logging
import secrets
import string
from collections.abc import Callable
from dataclasses import replace

from biggestor.domain.models import (
    SYSTEM_USER_ID,
    BugReport,
    License,
    LicenseStatus,
    User,
    new_id,
)
from biggestor.domain.ports import DataStore
from biggestor.services.auth import BYPASS_USERNAME
from biggestor.services.dates import parse_iso, utc_now_iso

logger = logging.getLogger(__name__)

LICENSES = "licenses"
BUG_REPORTS = "bug_reports"

_KEY_ALPHABET = string.ascii_uppercase + string.digits


def is_admin(user: User | None) -> bool:
    return user is not None and user.username.lower() == BYPASS_USERNAME


def generate_license_key() -> str:
    """Chave no formato BIG-XXXX-XXXX-XXXX"""
    groups = ("".join(secrets.choice(_KEY_ALPHABET) for _ in range(4)) for _ in range(3))
    return "BIG-" + "-".join(groups)


class LicenseManager:
    def __init__(self, store: DataStore, now: Callable[[], str] = utc_now_iso) -> None:
        self._store = store
        self._now = now

    def list(self) -> list[License]:
        return [License.from_dict(lic) for lic in self._store.get(SYSTEM_USER_ID, LICENSES) or []]

    def _save(self, licenses: list[License]) -> None:
        self._store.set(SYSTEM_USER_ID, LICENSES, [lic.to_dict() for lic in licenses])

    def generate(self, created_by: str) -> License:
        licenses = self.list()
        existing = {lic.key for lic in licenses}
        key = generate_license_key()
        while key in existing:
            key = generate_license_key()

        license = License(
            key=key,
            status=LicenseStatus.ACTIVE,
            created_at=self._now(),
            created_by=created_by,
        )
        self._save([license, *licenses])
        logger.info("License generated: key=%s, by=%s", key, created_by)
        return license

    def revoke(self, key: str) -> bool:
        """Revoga a licença; quem a usou perde o acesso no próximo login"""
        licenses = self.list()
        if not any(lic.key == key for lic in licenses):
            logger.warning("License not found: %s", key)
            return False
        self._save(
            [replace(lic, status=LicenseStatus.REVOKED) if lic.key == key else lic for lic in licenses]
        )
        logger.info("License revoked: key=%s", key)
        return True


class BugReportManager:
    def __init__(self, store: DataStore, now: Callable[[], str] = utc_now_iso) -> None:
        self._store = store
        self._now = now

    def _load(self) -> list[BugReport]:
        return [BugReport.from_dict(r) for r in self._store.get(SYSTEM_USER_ID, BUG_REPORTS) or []]

    def _save(self, reports: list[BugReport]) -> None:
        self._store.set(SYSTEM_USER_ID, BUG_REPORTS, [r.to_dict() for r in reports])

    def list(self) -> list[BugReport]:
        """Relatos do mais recente para o mais antigo"""

        def sort_key(report: BugReport) -> float:
            try:
                return parse_iso(report.timestamp).timestamp()
            except ValueError:
                return 0.0

        return sorted(self._load(), key=sort_key, reverse=True)

    def report(self, reporter: str, description: str) -> BugReport:
        report = BugReport(
            id=new_id(),
            reporter=reporter,
            description=description.strip(),
            timestamp=self._now(),
        )
        self._save([*self._load(), report])
        logger.info("Bug reported: id=%s, reporter=%s", report.id, reporter)
        return report

    def resolve(self, report_id: str) -> None:
        self._save(
            [replace(r, status="resolved") if r.id == report_id else r for r in self._load()]
        )

    def delete(self, report_id: str) -> None:
        self._save([r for r in self._load() if r.id != report_id])
