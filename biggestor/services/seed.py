"""Dados de exemplo para contas novas"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from biggestor.domain.models import (
    Client,
    Contract,
    ContractDuration,
    DraftNote,
    DraftType,
    Job,
    JobStatus,
    Payment,
    ScriptLine,
    ServiceType,
    Task,
    User,
    new_id,
)


@dataclass(frozen=True)
class SeedData:
    clients: list[Client]
    jobs: list[Job]
    contracts: list[Contract]
    draft_notes: list[DraftNote]


def _iso(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_seed(user: User, now: datetime | None = None) -> SeedData:
    """
    Monta o conjunto de exemplo: 5 clientes, 5 jobs, 1 contrato e 1 roteiro.

    Todos os jobs e o contrato pertencem a `user`; os prazos são relativos a `now`.
    """
    now = now or datetime.now(UTC)
    created = _iso(now)

    def client(name: str, company: str | None, email: str, phone: str) -> Client:
        return Client(
            id=new_id(),
            name=name,
            company=company,
            email=email,
            phone=phone,
            created_at=created,
        )

    clients = [
        client("Ana Souza", "TechCorp Solutions", "ana@techcorp.com.br", "(11) 98888-1001"),
        client("Bruno Lima", "Café Aroma", "contato@cafearoma.com.br", "(11) 97777-2002"),
        client("Carla Mendes", None, "carla.mendes@email.com", "(21) 96666-3003"),
        client("Diego Rocha", "Academia Movimento", "diego@movimento.fit", "(31) 95555-4004"),
        client("Eduarda Alves", "Studio Flor", "eduarda@studioflor.com", "(41) 94444-5005"),
    ]

    def job(
        name: str,
        owner_client: Client,
        service_type: ServiceType,
        value: float,
        days: int,
        status: JobStatus,
        **kwargs,
    ) -> Job:
        return Job(
            id=new_id(),
            name=name,
            client_id=owner_client.id,
            service_type=service_type.value,
            value=value,
            deadline=_iso(now + timedelta(days=days)),
            status=status,
            created_at=created,
            owner_id=user.id,
            owner_username=user.username,
            **kwargs,
        )

    jobs = [
        job(
            "Vídeo Promocional TechCorp",
            clients[0],
            ServiceType.VIDEO,
            4500.0,
            7,
            JobStatus.PRODUCTION,
            payments=[Payment(id=new_id(), amount=1800.0, date=created, method="PIX")],
            tasks=[
                Task(id=new_id(), text="Roteiro aprovado", is_completed=True),
                Task(id=new_id(), text="Gravação"),
                Task(id=new_id(), text="Edição e color"),
            ],
        ),
        job(
            "Ensaio de Produtos Café Aroma",
            clients[1],
            ServiceType.PHOTO,
            1800.0,
            2,
            JobStatus.BRIEFING,
        ),
        job(
            "Identidade Visual Carla Mendes",
            clients[2],
            ServiceType.DESIGN,
            2200.0,
            14,
            JobStatus.REVIEW,
            payments=[Payment(id=new_id(), amount=1100.0, date=created, method="PIX")],
        ),
        job(
            "Social Media Academia Movimento",
            clients[3],
            ServiceType.SOCIAL_MEDIA,
            1500.0,
            30,
            JobStatus.BRIEFING,
            is_recurring=True,
        ),
        job(
            "Site Institucional Studio Flor",
            clients[4],
            ServiceType.SITES,
            3800.0,
            -3,
            JobStatus.FINALIZED,
            payments=[Payment(id=new_id(), amount=3800.0, date=created, method="Transferência")],
        ),
    ]

    contracts = [
        Contract(
            id=new_id(),
            title="Contrato Social Media",
            client_id=clients[3].id,
            content=(
                "CONTRATO DE PRESTAÇÃO DE SERVIÇOS\n\n"
                "Objeto: gestão mensal das redes sociais da Academia Movimento.\n"
                "Valor: R$ 1.500,00 por mês.\n"
                "Vigência: 6 meses a partir da assinatura."
            ),
            created_at=created,
            owner_id=user.id,
            owner_username=user.username,
            duration=ContractDuration.SEMESTRAL,
        )
    ]

    draft_notes = [
        DraftNote(
            id=new_id(),
            title="Roteiro - Vídeo Promocional TechCorp",
            type=DraftType.SCRIPT,
            script_lines=[
                ScriptLine(new_id(), "Cena 1 - Abertura", "Drone sobre a fachada da empresa.", 8),
                ScriptLine(new_id(), "Cena 2 - Equipe", "Equipe trabalhando, cortes rápidos.", 15),
                ScriptLine(new_id(), "Cena 3 - Depoimento", "CEO fala sobre a missão da TechCorp.", 30),
                ScriptLine(new_id(), "Cena 4 - Encerramento", "Logo animado e chamada final.", 7),
            ],
            created_at=created,
            updated_at=created,
        )
    ]

    return SeedData(clients=clients, jobs=jobs, contracts=contracts, draft_notes=draft_notes)
