"""AppDataService - fonte única dos dados da sessão

Mantém em memória jobs, clientes, contratos, rascunhos e configurações do
usuário logado e media toda a persistência. Depende apenas dos Ports.

Modelo de consistência: cada mutação calcula a coleção nova, grava o
subconjunto do próprio usuário e atualiza a memória mesmo que a gravação
falhe (a falha vira um toast de erro). Não há rollback; a memória vale até
o próximo load().
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

from biggestor.domain.errors import ImportDataError, ValidationError
from biggestor.domain.models import (
    SYSTEM_USER_ID,
    UNKNOWN_OWNER,
    AppSettings,
    Client,
    Contract,
    DraftNote,
    DraftType,
    Job,
    JobStatus,
    ScriptLine,
    User,
    new_id,
)
from biggestor.domain.ports import DataStore, Toaster
from biggestor.services.dates import add_one_month, parse_iso, utc_now_iso
from biggestor.services.seed import build_seed
from biggestor.services.validation import validate_client, validate_contract, validate_job

logger = logging.getLogger(__name__)

# Coleções (chaves dos documentos)
JOBS = "jobs"
CLIENTS = "clients"
CONTRACTS = "contracts"
DRAFT_NOTES = "draftNotes"
SETTINGS = "settings"
USERS = "users"

EXPORT_VERSION = "2.5-contracts-owned"
RECURRENCE_SUFFIX = re.compile(r"\s*\(Mês Seguinte\)\s*$")


@dataclass(frozen=True)
class ClientDeletionImpact:
    """Efeito em cascata da exclusão de um cliente"""

    client_id: str
    contract_ids: list[str]
    unlinked_job_ids: list[str]
    active_job_count: int
    message: str


def migrate_draft(raw: dict) -> DraftNote:
    """Rascunho legado (só `content`, sem `scriptLines`) vira uma linha de roteiro"""
    draft = DraftNote.from_dict(raw)
    if "scriptLines" not in raw and draft.content:
        line = ScriptLine(id=new_id(), scene="Cena 1", description=draft.content, duration=0)
        draft = replace(draft, script_lines=[line])
    return draft


def backup_filename(day: date) -> str:
    return f"big_backup_{day.isoformat()}.json"


def _last_payment_timestamp(job: Job) -> float:
    timestamps = []
    for payment in job.payments:
        try:
            moment = parse_iso(payment.date)
        except ValueError:
            continue
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
        timestamps.append(moment.timestamp())
    return max(timestamps, default=0.0)


class AppDataService:
    """
    Dados de uma sessão autenticada.

    Criado no login e descartado no logout (ver SessionManager).

    Fluxo do load():
    1. Diretório global de usuários (system_data/users)
    2. Configurações do usuário, mescladas sobre os padrões
    3. Jobs do usuário e dos membros da equipe, em paralelo
    4. Clientes, contratos e rascunhos do usuário
    5. Conta nova: grava e carrega os dados de exemplo
    """

    def __init__(
        self,
        store: DataStore,
        toaster: Toaster,
        user: User | None,
        now: Callable[[], str] = utc_now_iso,
        max_workers: int = 8,
    ) -> None:
        """
        Args:
            store: armazenamento de documentos
            toaster: feedback ao usuário
            user: usuário autenticado (None = sem sessão)
            now: gerador de timestamps ISO8601 (injetável nos testes)
            max_workers: limite de leituras paralelas de jobs
        """
        self._store = store
        self._toaster = toaster
        self._user = user
        self._now = now
        self._max_workers = max_workers
        self._loading = True
        self._reset()

    # ── Estado ───────────────────────────────────────────────────────────────

    def _reset(self) -> None:
        self._jobs: list[Job] = []
        self._clients: list[Client] = []
        self._contracts: list[Contract] = []
        self._draft_notes: list[DraftNote] = []
        self._settings = AppSettings()
        self._all_users: list[User] = []

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def jobs(self) -> list[Job]:
        return list(self._jobs)

    @property
    def clients(self) -> list[Client]:
        return list(self._clients)

    @property
    def contracts(self) -> list[Contract]:
        return list(self._contracts)

    @property
    def draft_notes(self) -> list[DraftNote]:
        return list(self._draft_notes)

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @property
    def all_users(self) -> list[User]:
        return list(self._all_users)

    # ── Carga ────────────────────────────────────────────────────────────────

    def load(self) -> None:
        """Recarrega tudo do armazenamento. Erros zeram o estado e são registrados"""
        self._loading = True
        try:
            if self._user is None:
                self._reset()
                return
            self._load_for(self._user)
        except Exception:
            logger.exception("Failed to load data: uid=%s", self._user.id if self._user else None)
            self._reset()
            self._toaster.error("Erro ao carregar dados da nuvem.")
        finally:
            self._loading = False

    def _load_for(self, user: User) -> None:
        logger.info("Loading data: uid=%s", user.id)

        all_users = [User.from_dict(u) for u in self._store.get(SYSTEM_USER_ID, USERS) or []]
        settings = AppSettings.from_dict(self._store.get(user.id, SETTINGS))

        owners = [user, *self._resolve_team(settings.team_members, all_users, user)]
        jobs = self._load_jobs(user, owners)

        raw_clients = self._store.get(user.id, CLIENTS) or []
        raw_contracts = self._store.get(user.id, CONTRACTS) or []
        raw_drafts = self._store.get(user.id, DRAFT_NOTES) or []

        clients = [Client.from_dict(c) for c in raw_clients]
        contracts = [
            replace(
                Contract.from_dict(c),
                owner_id=c.get("ownerId") or user.id,
                owner_username=c.get("ownerUsername") or user.username,
            )
            for c in raw_contracts
        ]
        draft_notes = [migrate_draft(d) for d in raw_drafts]

        owned_jobs = sum(1 for j in jobs if j.owner_id == user.id)
        is_new_account = (
            not raw_clients and not raw_drafts and not settings.user_name and owned_jobs == 0
        )
        if is_new_account:
            logger.info("New account detected, seeding sample data: uid=%s", user.id)
            seed = build_seed(user)
            clients = seed.clients
            jobs = [*seed.jobs, *jobs]
            contracts = [*seed.contracts, *contracts]
            draft_notes = seed.draft_notes
            self._persist(JOBS, [j.to_dict() for j in seed.jobs])
            self._persist(CLIENTS, [c.to_dict() for c in clients])
            self._persist(CONTRACTS, [c.to_dict() for c in contracts if c.owner_id == user.id])
            self._persist(DRAFT_NOTES, [d.to_dict() for d in draft_notes])

        self._all_users = all_users
        self._settings = settings
        self._jobs = jobs
        self._clients = clients
        self._contracts = contracts
        self._draft_notes = draft_notes
        logger.info(
            "Data loaded: uid=%s, jobs=%d, clients=%d, contracts=%d, drafts=%d",
            user.id,
            len(jobs),
            len(clients),
            len(contracts),
            len(draft_notes),
        )

    def _resolve_team(self, usernames: list[str], directory: list[User], user: User) -> list[User]:
        """Usernames declarados na equipe -> contas do diretório (sem diferenciar maiúsculas)"""
        by_name = {u.username.lower(): u for u in directory if u.username}
        members: list[User] = []
        for name in usernames:
            member = by_name.get(name.strip().lower())
            if member is None:
                logger.warning("Team member not found in directory: %s", name)
                continue
            if member.id == user.id or member in members:
                continue
            members.append(member)
        return members

    def _load_jobs(self, user: User, owners: list[User]) -> list[Job]:
        """
        Busca os jobs de cada dono em paralelo e normaliza a posse uma única vez.

        O dono é sempre o documento de onde o job veio. Jobs de colegas só
        entram quando marcados como job de equipe; ids repetidos mantêm a
        primeira ocorrência.
        """
        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(owners))) as executor:
            fetched = list(executor.map(lambda o: self._store.get(o.id, JOBS) or [], owners))

        jobs: list[Job] = []
        seen: set[str] = set()
        for owner, raw_jobs in zip(owners, fetched):
            for raw in raw_jobs:
                job = Job.from_dict(raw)
                job = replace(
                    job,
                    owner_id=owner.id,
                    owner_username=owner.username or job.owner_username or UNKNOWN_OWNER,
                )
                if owner.id != user.id and not job.is_team_job:
                    continue
                if job.id in seen:
                    logger.warning("Duplicate job id skipped: %s (owner=%s)", job.id, owner.id)
                    continue
                seen.add(job.id)
                jobs.append(job)
        return jobs

    # ── Persistência ─────────────────────────────────────────────────────────

    def _persist(self, key: str, data: Any) -> bool:
        try:
            self._store.set(self._user.id, key, data)
            return True
        except Exception as e:
            logger.error(
                "Failed to save %s: uid=%s, error=%s",
                key,
                self._user.id,
                e,
                extra={"extra_fields": {"event": "save_failed", "uid": self._user.id, "collection": key}},
            )
            self._toaster.error(f"Erro ao salvar {key} na nuvem.")
            return False

    def _persist_jobs(self, jobs: list[Job]) -> bool:
        """Grava só os jobs do próprio usuário; jobs de colegas nunca são regravados"""
        return self._persist(JOBS, [j.to_dict() for j in jobs if j.owner_id == self._user.id])

    def _persist_contracts(self, contracts: list[Contract]) -> bool:
        return self._persist(
            CONTRACTS, [c.to_dict() for c in contracts if c.owner_id == self._user.id]
        )

    def _persist_clients(self, clients: list[Client]) -> bool:
        return self._persist(CLIENTS, [c.to_dict() for c in clients])

    def _persist_drafts(self, drafts: list[DraftNote]) -> bool:
        return self._persist(DRAFT_NOTES, [d.to_dict() for d in drafts])

    def _require_user(self, operation: str) -> bool:
        if self._user is None:
            logger.warning("%s called without an authenticated user", operation)
            return False
        return True

    def _validated(self, validator: Callable[[Any], None], value: Any) -> bool:
        try:
            validator(value)
        except ValidationError as e:
            self._toaster.error(str(e))
            return False
        return True

    # ── Jobs ─────────────────────────────────────────────────────────────────

    def add_job(self, job: Job) -> Job | None:
        """
        Cria um job. Id, datas, listas internas e dono são sempre gerados aqui,
        nunca aceitos do chamador.
        """
        if not self._require_user("add_job") or not self._validated(validate_job, job):
            return None

        new_job = replace(
            job,
            id=new_id(),
            created_at=self._now(),
            is_deleted=False,
            observations_log=[],
            payments=[],
            tasks=[],
            linked_draft_ids=[],
            owner_id=self._user.id,
            owner_username=self._user.username,
        )
        jobs = [*self._jobs, new_job]
        self._persist_jobs(jobs)
        self._jobs = jobs
        logger.info("Job added: id=%s", new_job.id)
        return new_job

    def update_job(self, job: Job) -> None:
        """
        Substitui um job existente.

        Um job recorrente que passa para Pago gera a ocorrência do mês seguinte,
        gravada no mesmo lote.
        """
        if not self._require_user("update_job"):
            return
        previous = self.get_job_by_id(job.id)
        if previous is None:
            logger.warning("update_job: job not found: %s", job.id)
            return
        if not self._validated(validate_job, job):
            return

        # dono fixado no load()
        job = replace(job, owner_id=previous.owner_id, owner_username=previous.owner_username)
        jobs = [job if j.id == job.id else j for j in self._jobs]
        if previous.status != JobStatus.PAID and job.status == JobStatus.PAID and job.is_recurring:
            next_job = self._next_occurrence(job)
            jobs.append(next_job)
            logger.info("Recurring job spawned: from=%s, new=%s", job.id, next_job.id)

        self._persist_jobs(jobs)
        self._jobs = jobs

    def _next_occurrence(self, job: Job) -> Job:
        return replace(
            job,
            id=new_id(),
            created_at=self._now(),
            name=RECURRENCE_SUFFIX.sub("", job.name),
            deadline=add_one_month(job.deadline),
            status=JobStatus.BRIEFING,
            payments=[],
            tasks=[],
            financial_tasks=[],
            observations_log=[],
            linked_draft_ids=[],
        )

    def _change_job(self, job_id: str, operation: str, **changes: Any) -> bool:
        if not self._require_user(operation):
            return False
        if self.get_job_by_id(job_id) is None:
            logger.warning("%s: job not found: %s", operation, job_id)
            return False
        jobs = [replace(j, **changes) if j.id == job_id else j for j in self._jobs]
        self._persist_jobs(jobs)
        self._jobs = jobs
        return True

    def delete_job(self, job_id: str) -> None:
        """Exclusão lógica (vai para a lixeira)"""
        self._change_job(job_id, "delete_job", is_deleted=True)

    def restore_job(self, job_id: str) -> None:
        self._change_job(job_id, "restore_job", is_deleted=False)

    def unarchive_job(self, job_id: str) -> None:
        """Job pago volta para a coluna Finalizado"""
        self._change_job(job_id, "unarchive_job", status=JobStatus.FINALIZED)

    def permanently_delete_job(self, job_id: str) -> None:
        if not self._require_user("permanently_delete_job"):
            return
        jobs = [j for j in self._jobs if j.id != job_id]
        self._persist_jobs(jobs)
        self._jobs = jobs

    def get_job_by_id(self, job_id: str) -> Job | None:
        return next((j for j in self._jobs if j.id == job_id), None)

    def visible_jobs(self) -> list[Job]:
        return [j for j in self._jobs if not j.is_deleted]

    def trashed_jobs(self) -> list[Job]:
        return [j for j in self._jobs if j.is_deleted]

    def archived_jobs(self) -> list[Job]:
        """Jobs pagos, do pagamento mais recente para o mais antigo"""
        archived = [j for j in self._jobs if j.status == JobStatus.PAID and not j.is_deleted]
        return sorted(archived, key=_last_payment_timestamp, reverse=True)

    def jobs_for_client(self, client_id: str) -> list[Job]:
        return [j for j in self._jobs if j.client_id == client_id and not j.is_deleted]

    # ── Clientes ─────────────────────────────────────────────────────────────

    def add_client(self, client: Client) -> Client | None:
        if not self._require_user("add_client") or not self._validated(validate_client, client):
            return None
        new_client = replace(client, id=new_id(), created_at=self._now())
        clients = [*self._clients, new_client]
        self._persist_clients(clients)
        self._clients = clients
        logger.info("Client added: id=%s", new_client.id)
        return new_client

    def update_client(self, client: Client) -> None:
        if not self._require_user("update_client") or not self._validated(validate_client, client):
            return
        clients = [client if c.id == client.id else c for c in self._clients]
        self._persist_clients(clients)
        self._clients = clients

    def get_client_by_id(self, client_id: str) -> Client | None:
        return next((c for c in self._clients if c.id == client_id), None)

    def describe_client_deletion(self, client_id: str) -> ClientDeletionImpact:
        """Calcula o que a exclusão do cliente vai apagar ou desvincular"""
        contract_ids = [c.id for c in self._contracts if c.client_id == client_id]
        linked = [j for j in self._jobs if j.linked_contract_id and j.linked_contract_id in contract_ids]
        active = [j for j in linked if not j.is_deleted]

        message = "Tem certeza que deseja excluir este cliente?"
        if contract_ids:
            message += (
                f"\n\n{len(contract_ids)} contrato(s) vinculado(s) será(ão) "
                "excluído(s) permanentemente."
            )
        if active:
            message += f"\n{len(active)} job(s) ativo(s) perderá(ão) o vínculo com o contrato."

        return ClientDeletionImpact(
            client_id=client_id,
            contract_ids=contract_ids,
            unlinked_job_ids=[j.id for j in linked],
            active_job_count=len(active),
            message=message,
        )

    def delete_client(self, client_id: str, confirm: Callable[[str], bool]) -> bool:
        """
        Exclui o cliente após confirmação.

        Contratos do cliente são apagados e os jobs que apontavam para eles
        perdem o vínculo. Retorna False se o usuário cancelar.
        """
        if not self._require_user("delete_client"):
            return False
        impact = self.describe_client_deletion(client_id)
        if not confirm(impact.message):
            logger.info("Client deletion cancelled: id=%s", client_id)
            return False

        removed = set(impact.contract_ids)
        contracts = [c for c in self._contracts if c.id not in removed]
        jobs = [
            replace(j, linked_contract_id=None) if j.linked_contract_id in removed else j
            for j in self._jobs
        ]
        clients = [c for c in self._clients if c.id != client_id]

        if removed:
            self._persist_contracts(contracts)
            self._persist_jobs(jobs)
        self._persist_clients(clients)

        self._contracts = contracts
        self._jobs = jobs
        self._clients = clients
        self._toaster.success("Cliente excluído.")
        logger.info(
            "Client deleted: id=%s, contracts=%d, unlinked_jobs=%d",
            client_id,
            len(removed),
            len(impact.unlinked_job_ids),
        )
        return True

    # ── Contratos ────────────────────────────────────────────────────────────

    def add_contract(self, contract: Contract) -> Contract | None:
        if not self._require_user("add_contract") or not self._validated(
            validate_contract, contract
        ):
            return None
        new_contract = replace(
            contract,
            id=new_id(),
            created_at=self._now(),
            owner_id=self._user.id,
            owner_username=self._user.username,
        )
        contracts = [*self._contracts, new_contract]
        self._persist_contracts(contracts)
        self._contracts = contracts
        logger.info("Contract added: id=%s", new_contract.id)
        return new_contract

    def update_contract(self, contract: Contract) -> None:
        if not self._require_user("update_contract") or not self._validated(
            validate_contract, contract
        ):
            return
        previous = next((c for c in self._contracts if c.id == contract.id), None)
        if previous is None:
            logger.warning("update_contract: contract not found: %s", contract.id)
            return
        contract = replace(
            contract, owner_id=previous.owner_id, owner_username=previous.owner_username
        )
        contracts = [contract if c.id == contract.id else c for c in self._contracts]
        self._persist_contracts(contracts)
        self._contracts = contracts

    def delete_contract(self, contract_id: str) -> None:
        """Remove o contrato e desvincula os jobs que o referenciavam"""
        if not self._require_user("delete_contract"):
            return
        contracts = [c for c in self._contracts if c.id != contract_id]
        jobs = [
            replace(j, linked_contract_id=None) if j.linked_contract_id == contract_id else j
            for j in self._jobs
        ]
        self._persist_contracts(contracts)
        self._persist_jobs(jobs)
        self._contracts = contracts
        self._jobs = jobs

    # ── Configurações ────────────────────────────────────────────────────────

    def update_settings(self, **changes: Any) -> None:
        """Atualização parcial, ex.: update_settings(theme="dark")"""
        if not self._require_user("update_settings"):
            return
        settings = replace(self._settings, **changes)
        self._persist(SETTINGS, settings.to_dict())
        self._settings = settings

    # ── Rascunhos ────────────────────────────────────────────────────────────

    def add_draft_note(self, title: str, type: DraftType = DraftType.TEXT) -> DraftNote | None:
        if not self._require_user("add_draft_note"):
            return None
        now = self._now()
        draft = DraftNote(id=new_id(), title=title, type=type, created_at=now, updated_at=now)
        drafts = [draft, *self._draft_notes]
        self._persist_drafts(drafts)
        self._draft_notes = drafts
        return draft

    def update_draft_note(self, draft: DraftNote) -> None:
        if not self._require_user("update_draft_note"):
            return
        updated = replace(draft, updated_at=self._now())
        drafts = [updated if d.id == draft.id else d for d in self._draft_notes]
        self._persist_drafts(drafts)
        self._draft_notes = drafts

    def delete_draft_note(self, draft_id: str) -> None:
        """Remove o rascunho e o desvincula dos jobs"""
        if not self._require_user("delete_draft_note"):
            return
        drafts = [d for d in self._draft_notes if d.id != draft_id]
        jobs = [
            replace(j, linked_draft_ids=[i for i in j.linked_draft_ids if i != draft_id])
            if draft_id in j.linked_draft_ids
            else j
            for j in self._jobs
        ]
        self._persist_drafts(drafts)
        self._persist_jobs(jobs)
        self._draft_notes = drafts
        self._jobs = jobs

    # ── Backup ───────────────────────────────────────────────────────────────

    def export_data(self, destination: str | Path | None = None) -> dict:
        """
        Gera o backup (jobs e contratos próprios, clientes, rascunhos, configurações).

        Os mesmos dados são regravados antes. Com `destination` (diretório),
        o arquivo big_backup_YYYY-MM-DD.json é escrito nele.
        """
        if not self._require_user("export_data"):
            return {}

        owned_jobs = [j for j in self._jobs if j.owner_id == self._user.id]
        owned_contracts = [c for c in self._contracts if c.owner_id == self._user.id]

        self._persist_jobs(owned_jobs)
        self._persist_contracts(owned_contracts)
        self._persist_clients(self._clients)
        self._persist_drafts(self._draft_notes)
        self._persist(SETTINGS, self._settings.to_dict())

        exported_at = self._now()
        payload = {
            "version": EXPORT_VERSION,
            "exportedAt": exported_at,
            "data": {
                "jobs": [j.to_dict() for j in owned_jobs],
                "clients": [c.to_dict() for c in self._clients],
                "contracts": [c.to_dict() for c in owned_contracts],
                "draftNotes": [d.to_dict() for d in self._draft_notes],
                "settings": self._settings.to_dict(),
            },
        }

        if destination is not None:
            path = Path(destination) / backup_filename(parse_iso(exported_at).date())
            path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
            logger.info("Backup written: %s", path)
        return payload

    def import_data(self, json_text: str) -> bool:
        """
        Importa um backup, substituindo os dados do próprio usuário.

        Jobs e contratos passam a pertencer ao usuário atual. Em caso de
        sucesso os dados são recarregados do armazenamento.
        """
        if not self._require_user("import_data"):
            return False
        user = self._user
        try:
            data = self._parse_backup(json_text)
            jobs = [
                replace(Job.from_dict(j), owner_id=user.id, owner_username=user.username)
                for j in data["jobs"]
            ]
            contracts = [
                replace(Contract.from_dict(c), owner_id=user.id, owner_username=user.username)
                for c in data.get("contracts") or []
            ]
            clients = [Client.from_dict(c) for c in data["clients"]]
            drafts = [migrate_draft(d) for d in data.get("draftNotes") or []]
            settings = AppSettings.from_dict(data["settings"])
        except ImportDataError as e:
            logger.warning("Rejected backup file: %s", e)
            self._toaster.error("Arquivo de dados inválido.")
            return False
        except (ValueError, TypeError, AttributeError) as e:
            logger.error("Failed to import data: %s", e)
            self._toaster.error("Erro ao importar dados.")
            return False

        results = [
            self._persist_jobs(jobs),
            self._persist_clients(clients),
            self._persist_contracts(contracts),
            self._persist_drafts(drafts),
            self._persist(SETTINGS, settings.to_dict()),
        ]

        self._jobs = [j for j in self._jobs if j.owner_id != user.id] + jobs
        self._contracts = [c for c in self._contracts if c.owner_id != user.id] + contracts
        self._clients = clients
        self._draft_notes = drafts
        self._settings = settings

        if not all(results):
            logger.error("Import finished with write failures: uid=%s", user.id)
            return False

        logger.info("Import complete: uid=%s, jobs=%d, clients=%d", user.id, len(jobs), len(clients))
        self._toaster.success("Dados importados com sucesso!")
        self.load()
        return True

    @staticmethod
    def _parse_backup(json_text: str) -> dict:
        """
        Valida o arquivo de backup.

        Aceita o formato atual ({version, exportedAt, data:{...}}) e o formato
        plano da versão 1.0 (coleções no nível raiz).

        Raises:
            ImportDataError: estrutura inválida
            ValueError: JSON malformado
        """
        payload = json.loads(json_text)
        if not isinstance(payload, dict):
            raise ImportDataError("backup root is not an object")
        data = payload.get("data") if isinstance(payload.get("data"), dict) else payload

        missing = [key for key in ("jobs", "clients", "settings") if key not in data]
        if missing:
            raise ImportDataError(f"missing keys: {', '.join(missing)}")
        if not isinstance(data["jobs"], list) or not isinstance(data["clients"], list):
            raise ImportDataError("jobs and clients must be lists")
        if not isinstance(data["settings"], dict):
            raise ImportDataError("settings must be an object")
        for key in ("contracts", "draftNotes"):
            if data.get(key) is not None and not isinstance(data[key], list):
                raise ImportDataError(f"{key} must be a list")
        for key in ("jobs", "clients", "contracts", "draftNotes"):
            if not all(isinstance(item, dict) for item in data.get(key) or []):
                raise ImportDataError(f"{key} entries must be objects")
        return data
