"""Modelos de domínio - estruturas de dados sem dependências externas

Os documentos persistidos usam as chaves camelCase já gravadas no armazenamento
(``clientId``, ``isDeleted``...). ``from_dict`` aplica os valores padrão de
registros antigos e ``to_dict`` gera o formato gravado. Chaves que este módulo
não modela ficam em ``extra`` e são regravadas sem alteração.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

SYSTEM_USER_ID = "system_data"
UNKNOWN_OWNER = "Desconhecido"


def new_id() -> str:
    """UUID v4 gerado no cliente"""
    return str(uuid.uuid4())


def _extra(data: dict, known: frozenset[str]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if k not in known}


def _compact(data: dict) -> dict:
    """Remove chaves None (equivalente a campos undefined no JSON)"""
    return {k: v for k, v in data.items() if v is not None}


def _number(value: Any) -> float:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


class JobStatus(Enum):
    """Colunas do kanban de jobs"""

    BRIEFING = "Briefing"
    PRODUCTION = "Produção"
    REVIEW = "Revisão"
    FINALIZED = "Finalizado"
    PAID = "Pago"
    OTHER = "Outros"

    @classmethod
    def parse(cls, value: Any) -> JobStatus:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            logger.warning("Invalid job status: %s, using %s", value, cls.OTHER.value)
            return cls.OTHER


class ServiceType(Enum):
    VIDEO = "Vídeo"
    PHOTO = "Fotografia"
    DESIGN = "Design"
    SITES = "Sites"
    STORY = "Story"
    CASAMENTO = "Casamento"
    CONTEUDO = "Conteúdos"
    SET = "Set"
    EVENTOS = "Eventos"
    INSTITUCIONAL = "Institucional"
    SOCIAL_MEDIA = "Social Media"
    AUXILIAR_T = "Auxiliar T."
    FREELA = "Freela"
    PROGRAMACAO = "Programação"
    REDACAO = "Redação"
    OTHER = "Outro"


class ContractDuration(Enum):
    PONTUAL = "Pontual"
    SEMESTRAL = "Semestral"
    ANUAL = "Anual"


class DraftType(Enum):
    TEXT = "TEXT"
    SCRIPT = "SCRIPT"


class LicenseStatus(Enum):
    ACTIVE = "active"
    USED = "used"
    REVOKED = "revoked"


# ── Usuário ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class User:
    """Conta do provedor de autenticação"""

    id: str
    username: str
    email: str

    @classmethod
    def from_dict(cls, data: dict) -> User:
        return cls(
            id=data.get("id", ""),
            username=data.get("username", ""),
            email=data.get("email", ""),
        )

    def to_dict(self) -> dict:
        return {"id": self.id, "username": self.username, "email": self.email}


# ── Cliente ──────────────────────────────────────────────────────────────────

_CLIENT_KEYS = frozenset(
    {
        "id",
        "name",
        "company",
        "email",
        "phone",
        "cpf",
        "instagram",
        "birthday",
        "observations",
        "createdAt",
    }
)


@dataclass(frozen=True)
class Client:
    name: str
    email: str
    id: str = ""
    created_at: str = ""
    company: str | None = None
    phone: str | None = None
    cpf: str | None = None
    instagram: str | None = None
    birthday: str | None = None  # YYYY-MM-DD
    observations: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> Client:
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            email=data.get("email", ""),
            created_at=data.get("createdAt", ""),
            company=data.get("company"),
            phone=data.get("phone"),
            cpf=data.get("cpf"),
            instagram=data.get("instagram"),
            birthday=data.get("birthday"),
            observations=data.get("observations"),
            extra=_extra(data, _CLIENT_KEYS),
        )

    def to_dict(self) -> dict:
        return {
            **self.extra,
            **_compact(
                {
                    "id": self.id,
                    "name": self.name,
                    "company": self.company,
                    "email": self.email,
                    "phone": self.phone,
                    "cpf": self.cpf,
                    "instagram": self.instagram,
                    "birthday": self.birthday,
                    "observations": self.observations,
                    "createdAt": self.created_at,
                }
            ),
        }


# ── Job ──────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Payment:
    id: str
    amount: float
    date: str  # ISO8601
    method: str | None = None
    notes: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> Payment:
        return cls(
            id=data.get("id") or new_id(),
            amount=_number(data.get("amount")),
            date=data.get("date", ""),
            method=data.get("method"),
            notes=data.get("notes"),
            extra=_extra(data, frozenset({"id", "amount", "date", "method", "notes"})),
        )

    def to_dict(self) -> dict:
        return {
            **self.extra,
            **_compact(
                {
                    "id": self.id,
                    "amount": self.amount,
                    "date": self.date,
                    "method": self.method,
                    "notes": self.notes,
                }
            ),
        }


@dataclass(frozen=True)
class Task:
    id: str
    text: str
    is_completed: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> Task:
        return cls(
            id=data.get("id") or new_id(),
            text=data.get("text", ""),
            is_completed=bool(data.get("isCompleted", False)),
        )

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text, "isCompleted": self.is_completed}


@dataclass(frozen=True)
class JobObservation:
    """Entrada do histórico de observações (formato legado)"""

    id: str
    text: str
    timestamp: str

    @classmethod
    def from_dict(cls, data: dict) -> JobObservation:
        return cls(
            id=data.get("id") or new_id(),
            text=data.get("text", ""),
            timestamp=data.get("timestamp", ""),
        )

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text, "timestamp": self.timestamp}


_JOB_KEYS = frozenset(
    {
        "id",
        "name",
        "clientId",
        "serviceType",
        "customServiceType",
        "value",
        "cost",
        "deadline",
        "recordingDate",
        "status",
        "cloudLinks",
        "cloudLink",
        "createdAt",
        "notes",
        "isDeleted",
        "observationsLog",
        "payments",
        "isRecurring",
        "createCalendarEvent",
        "tasks",
        "financialTasks",
        "linkedContractId",
        "linkedDraftIds",
        "ownerId",
        "ownerUsername",
        "isTeamJob",
    }
)


@dataclass(frozen=True)
class Job:
    """Projeto de um cliente (card do kanban)"""

    name: str
    client_id: str
    service_type: str  # valor de ServiceType; texto livre é preservado
    value: float
    deadline: str  # ISO8601
    status: JobStatus = JobStatus.BRIEFING
    id: str = ""
    created_at: str = ""
    custom_service_type: str | None = None
    cost: float | None = None
    recording_date: str | None = None
    cloud_links: list[str] = field(default_factory=list)
    notes: str | None = None
    is_deleted: bool = False
    observations_log: list[JobObservation] = field(default_factory=list)
    payments: list[Payment] = field(default_factory=list)
    is_recurring: bool = False
    create_calendar_event: bool = False
    tasks: list[Task] = field(default_factory=list)
    financial_tasks: list[Task] = field(default_factory=list)
    linked_contract_id: str | None = None
    linked_draft_ids: list[str] = field(default_factory=list)
    owner_id: str = ""
    owner_username: str = ""
    is_team_job: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> Job:
        """Converte um job persistido, preenchendo campos ausentes de versões antigas.

        O campo legado ``cloudLink`` (string única) é migrado para ``cloudLinks``.
        """
        cloud_links = [link for link in (data.get("cloudLinks") or []) if link]
        legacy_link = data.get("cloudLink")
        if legacy_link and legacy_link not in cloud_links:
            cloud_links.insert(0, legacy_link)

        cost = data.get("cost")
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            client_id=data.get("clientId", ""),
            service_type=data.get("serviceType") or ServiceType.OTHER.value,
            custom_service_type=data.get("customServiceType"),
            value=_number(data.get("value")),
            cost=None if cost is None else _number(cost),
            deadline=data.get("deadline", ""),
            recording_date=data.get("recordingDate"),
            status=JobStatus.parse(data.get("status", JobStatus.BRIEFING.value)),
            cloud_links=cloud_links,
            created_at=data.get("createdAt", ""),
            notes=data.get("notes"),
            is_deleted=bool(data.get("isDeleted", False)),
            observations_log=[
                JobObservation.from_dict(o) for o in data.get("observationsLog") or []
            ],
            payments=[Payment.from_dict(p) for p in data.get("payments") or []],
            is_recurring=bool(data.get("isRecurring", False)),
            create_calendar_event=bool(data.get("createCalendarEvent", False)),
            tasks=[Task.from_dict(t) for t in data.get("tasks") or []],
            financial_tasks=[Task.from_dict(t) for t in data.get("financialTasks") or []],
            linked_contract_id=data.get("linkedContractId") or None,
            linked_draft_ids=list(data.get("linkedDraftIds") or []),
            owner_id=data.get("ownerId") or "",
            owner_username=data.get("ownerUsername") or "",
            is_team_job=bool(data.get("isTeamJob", False)),
            extra=_extra(data, _JOB_KEYS),
        )

    def to_dict(self) -> dict:
        return {
            **self.extra,
            **_compact(
                {
                    "id": self.id,
                    "name": self.name,
                    "clientId": self.client_id,
                    "serviceType": self.service_type,
                    "customServiceType": self.custom_service_type,
                    "value": self.value,
                    "cost": self.cost,
                    "deadline": self.deadline,
                    "recordingDate": self.recording_date,
                    "status": self.status.value,
                    "cloudLinks": list(self.cloud_links),
                    "createdAt": self.created_at,
                    "notes": self.notes,
                    "isDeleted": self.is_deleted,
                    "observationsLog": [o.to_dict() for o in self.observations_log],
                    "payments": [p.to_dict() for p in self.payments],
                    "isRecurring": self.is_recurring,
                    "createCalendarEvent": self.create_calendar_event,
                    "tasks": [t.to_dict() for t in self.tasks],
                    "financialTasks": [t.to_dict() for t in self.financial_tasks],
                    "linkedContractId": self.linked_contract_id,
                    "linkedDraftIds": list(self.linked_draft_ids),
                    "ownerId": self.owner_id,
                    "ownerUsername": self.owner_username,
                    "isTeamJob": self.is_team_job,
                }
            ),
        }


# ── Contrato ─────────────────────────────────────────────────────────────────

_CONTRACT_KEYS = frozenset(
    {
        "id",
        "title",
        "clientId",
        "content",
        "createdAt",
        "ownerId",
        "ownerUsername",
        "isSigned",
        "duration",
    }
)


@dataclass(frozen=True)
class Contract:
    title: str
    client_id: str
    content: str = ""
    id: str = ""
    created_at: str = ""
    owner_id: str = ""
    owner_username: str = ""
    is_signed: bool = False
    duration: ContractDuration = ContractDuration.PONTUAL
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> Contract:
        try:
            duration = ContractDuration(data.get("duration") or "Pontual")
        except ValueError:
            logger.warning("Invalid contract duration: %s", data.get("duration"))
            duration = ContractDuration.PONTUAL
        return cls(
            id=data.get("id", ""),
            title=data.get("title", ""),
            client_id=data.get("clientId", ""),
            content=data.get("content", ""),
            created_at=data.get("createdAt", ""),
            owner_id=data.get("ownerId") or "",
            owner_username=data.get("ownerUsername") or "",
            is_signed=bool(data.get("isSigned", False)),
            duration=duration,
            extra=_extra(data, _CONTRACT_KEYS),
        )

    def to_dict(self) -> dict:
        return {
            **self.extra,
            "id": self.id,
            "title": self.title,
            "clientId": self.client_id,
            "content": self.content,
            "createdAt": self.created_at,
            "ownerId": self.owner_id,
            "ownerUsername": self.owner_username,
            "isSigned": self.is_signed,
            "duration": self.duration.value,
        }


# ── Rascunhos ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ScriptLine:
    id: str
    scene: str
    description: str
    duration: int = 0  # segundos

    @classmethod
    def from_dict(cls, data: dict) -> ScriptLine:
        return cls(
            id=data.get("id") or new_id(),
            scene=data.get("scene", ""),
            description=data.get("description", ""),
            duration=int(_number(data.get("duration"))),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "scene": self.scene,
            "description": self.description,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class Attachment:
    id: str
    name: str
    data_url: str

    @classmethod
    def from_dict(cls, data: dict) -> Attachment:
        return cls(
            id=data.get("id") or new_id(),
            name=data.get("name", ""),
            data_url=data.get("dataUrl", ""),
        )

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "dataUrl": self.data_url}


_DRAFT_KEYS = frozenset(
    {
        "id",
        "title",
        "type",
        "content",
        "scriptLines",
        "attachments",
        "createdAt",
        "updatedAt",
    }
)


@dataclass(frozen=True)
class DraftNote:
    title: str
    type: DraftType = DraftType.TEXT
    id: str = ""
    content: str = ""
    script_lines: list[ScriptLine] = field(default_factory=list)
    attachments: list[Attachment] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> DraftNote:
        try:
            draft_type = DraftType(data.get("type") or "TEXT")
        except ValueError:
            draft_type = DraftType.TEXT
        return cls(
            id=data.get("id", ""),
            title=data.get("title", ""),
            type=draft_type,
            content=data.get("content") or "",
            script_lines=[ScriptLine.from_dict(s) for s in data.get("scriptLines") or []],
            attachments=[Attachment.from_dict(a) for a in data.get("attachments") or []],
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt") or data.get("createdAt", ""),
            extra=_extra(data, _DRAFT_KEYS),
        )

    def to_dict(self) -> dict:
        return {
            **self.extra,
            "id": self.id,
            "title": self.title,
            "type": self.type.value,
            "content": self.content,
            "scriptLines": [s.to_dict() for s in self.script_lines],
            "attachments": [a.to_dict() for a in self.attachments],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


# ── Configurações ────────────────────────────────────────────────────────────

_SETTINGS_FIELDS = {
    # campo python -> chave JSON
    "asaas_url": "asaasUrl",
    "custom_link_title": "customLinkTitle",
    "user_name": "userName",
    "primary_color": "primaryColor",
    "accent_color": "accentColor",
    "splash_screen_background_color": "splashScreenBackgroundColor",
    "privacy_mode_enabled": "privacyModeEnabled",
    "team_members": "teamMembers",
    "kanban_columns": "kanbanColumns",
    "theme": "theme",
}


@dataclass(frozen=True)
class AppSettings:
    """Configurações da conta; uma instância por usuário, substituída por inteiro"""

    asaas_url: str = "https://www.asaas.com/login"
    custom_link_title: str = "Acessar Asaas"
    user_name: str = ""
    primary_color: str = "#f8fafc"
    accent_color: str = "#1e293b"
    splash_screen_background_color: str = "#111827"
    privacy_mode_enabled: bool = False
    team_members: list[str] = field(default_factory=list)
    kanban_columns: dict[str, str] = field(default_factory=dict)
    theme: str = "light"  # "light" | "dark"
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict | None) -> AppSettings:
        """Mescla as configurações salvas sobre os padrões (campos ausentes ou None)"""
        data = data or {}
        values = {
            attr: data[key]
            for attr, key in _SETTINGS_FIELDS.items()
            if data.get(key) is not None
        }
        if "team_members" in values:
            values["team_members"] = list(values["team_members"])
        if "kanban_columns" in values:
            values["kanban_columns"] = dict(values["kanban_columns"])
        return cls(
            **values,
            extra=_extra(data, frozenset(_SETTINGS_FIELDS.values())),
        )

    def to_dict(self) -> dict:
        return {
            **self.extra,
            **{key: getattr(self, attr) for attr, key in _SETTINGS_FIELDS.items()},
        }


# ── Registros do sistema ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class License:
    """Chave de convite que libera o cadastro de uma conta"""

    key: str
    status: LicenseStatus
    created_at: str
    created_by: str
    used_by: str | None = None
    used_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> License:
        try:
            status = LicenseStatus(data.get("status", "active"))
        except ValueError:
            logger.warning("Invalid license status: %s", data.get("status"))
            status = LicenseStatus.ACTIVE
        return cls(
            key=data.get("key", ""),
            status=status,
            created_at=data.get("createdAt", ""),
            created_by=data.get("createdBy", ""),
            used_by=data.get("usedBy"),
            used_at=data.get("usedAt"),
        )

    def to_dict(self) -> dict:
        return _compact(
            {
                "key": self.key,
                "status": self.status.value,
                "createdAt": self.created_at,
                "createdBy": self.created_by,
                "usedBy": self.used_by,
                "usedAt": self.used_at,
            }
        )


@dataclass(frozen=True)
class BugReport:
    id: str
    reporter: str
    description: str
    timestamp: str
    status: str = "open"  # "open" | "resolved"

    @classmethod
    def from_dict(cls, data: dict) -> BugReport:
        return cls(
            id=data.get("id", ""),
            reporter=data.get("reporter", ""),
            description=data.get("description", ""),
            timestamp=data.get("timestamp", ""),
            status=data.get("status", "open"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "reporter": self.reporter,
            "description": self.description,
            "timestamp": self.timestamp,
            "status": self.status,
        }


# ── Derivados (não persistidos) ──────────────────────────────────────────────


@dataclass(frozen=True)
class Notification:
    id: str
    type: str  # "deadline" | "overdue" | "client" | "birthday"
    message: str
    link_to: str
    entity_id: str
    is_read: bool = False


@dataclass(frozen=True)
class ToolCall:
    """Chamada de ferramenta devolvida pelo modelo generativo"""

    name: str
    args: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AssistantReply:
    text: str
    tool_calls: list[ToolCall] = field(default_factory=list)
