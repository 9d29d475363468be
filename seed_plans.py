"""
Seed script: cadastra o catálogo de planos.

Uso:
    python seed_plans.py

Idempotente: atualiza os planos existentes pelo slug.
"""
from app.database import session_scope
from app.models.plan import Plan, PlanType

PLANS = [
    {
        "slug": PlanType.FREE,
        "name": "Free",
        "price_cents": 0,
        "description": "Para testar a plataforma",
        "features": ["1 destino", "100 mídias/mês", "Delay mínimo 30s", "Suporte por email", "Logs básicos"],
        "max_destinations": 1,
        "max_media_per_month": 100,
        "has_scheduling": False,
        "has_ai_models": False,
    },
    {
        "slug": PlanType.BASIC,
        "name": "Basic",
        "price_cents": 4900,
        "description": "Para criadores de conteúdo",
        "features": [
            "5 destinos", "1.000 mídias/mês", "Delay mínimo 10s",
            "Agendamento", "Suporte prioritário", "Logs completos",
        ],
        "max_destinations": 5,
        "max_media_per_month": 1000,
        "has_scheduling": True,
        "has_ai_models": False,
    },
    {
        "slug": PlanType.PRO,
        "name": "Pro",
        "price_cents": 14900,
        "description": "Para profissionais",
        "features": [
            "20 destinos", "10.000 mídias/mês", "Delay mínimo 5s", "Agendamento avançado",
            "Model Hub completo", "API access", "Suporte 24/7", "Auditoria completa",
        ],
        "max_destinations": 20,
        "max_media_per_month": 10000,
        "has_scheduling": True,
        "has_ai_models": True,
    },
    {
        "slug": PlanType.AGENCY,
        "name": "Agency",
        "price_cents": 49900,
        "description": "Para agências e equipes",
        "features": [
            "Destinos ilimitados", "Mídias ilimitadas", "Delay customizável", "Multi-usuários",
            "White label", "API ilimitada", "Gerente dedicado", "SLA garantido",
        ],
        "max_destinations": None,
        "max_media_per_month": None,
        "has_scheduling": True,
        "has_ai_models": True,
    },
]

with session_scope() as db:
    for p in PLANS:
        plan = db.query(Plan).filter(Plan.slug == p["slug"]).first()
        if not plan:
            db.add(Plan(is_active=True, **p))
            print(f"  Created: {p['name']}")
        else:
            for field_name, value in p.items():
                setattr(plan, field_name, value)
            print(f"  Updated: {p['name']}")

print("\nDone.")
