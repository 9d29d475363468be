"""
Account managers: sellers assigned to a manager and the actions a manager
may take on them.

Every action on a seller is written to ``account_manager_logs``. Admins may
act on any seller; a manager only on sellers assigned to them.
"""
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.account_manager import AccountManagerSeller, AccountManagerLog
from app.models.user import User, AppRole

logger = logging.getLogger(__name__)

# Roles that can never be assigned as a managed seller
UNMANAGEABLE_ROLES = (AppRole.ADMIN, AppRole.GERENTE_CONTAS)


class ActionError(ValueError):
    """Seller action refused; the message is shown to the manager."""


def log_action(
    db: Session,
    manager_id: int,
    target_user_id: Optional[int],
    action: str,
    action_type: str,
    details: Optional[dict] = None,
) -> AccountManagerLog:
    entry = AccountManagerLog(
        manager_id=manager_id,
        target_user_id=target_user_id,
        action=action,
        action_type=action_type,
        details=details,
    )
    db.add(entry)
    return entry


def seller_counts(db: Session) -> Dict[int, int]:
    rows = (
        db.query(AccountManagerSeller.manager_id, func.count(AccountManagerSeller.id))
        .group_by(AccountManagerSeller.manager_id)
        .all()
    )
    return {manager_id: count for manager_id, count in rows}


def can_manage(db: Session, actor: User, seller_id: int) -> bool:
    if actor.role == AppRole.ADMIN:
        return True
    assignment = db.query(AccountManagerSeller).filter(
        AccountManagerSeller.manager_id == actor.id,
        AccountManagerSeller.seller_id == seller_id,
    ).first()
    return assignment is not None


def assign_sellers(db: Session, manager_id: int, seller_ids: Sequence[int]) -> Tuple[List[int], List[int]]:
    """
    Make ``seller_ids`` the complete set of sellers of a manager.

    Sellers taken from another manager are moved, since a seller has one
    manager at most. Returns ``(added, removed)``; the caller commits.
    """
    wanted = list(dict.fromkeys(seller_ids))
    current = db.query(AccountManagerSeller).filter(AccountManagerSeller.manager_id == manager_id).all()
    current_ids = {a.seller_id for a in current}

    if wanted:
        sellers = db.query(User).filter(User.id.in_(wanted)).all()
        found = {u.id: u for u in sellers}
        missing = [i for i in wanted if i not in found]
        if missing:
            raise ActionError(f"Unknown users: {', '.join(str(i) for i in missing)}")
        blocked = [i for i in wanted if found[i].role in UNMANAGEABLE_ROLES]
        if blocked:
            raise ActionError(f"Users cannot be managed: {', '.join(str(i) for i in blocked)}")

    to_add = [i for i in wanted if i not in current_ids]
    to_remove = [a for a in current if a.seller_id not in wanted]

    for assignment in to_remove:
        db.delete(assignment)

    if to_add:
        db.query(AccountManagerSeller).filter(
            AccountManagerSeller.seller_id.in_(to_add),
        ).delete(synchronize_session=False)
        for seller_id in to_add:
            db.add(AccountManagerSeller(manager_id=manager_id, seller_id=seller_id))

    removed = [a.seller_id for a in to_remove]
    logger.info("Manager %s sellers: %d added, %d removed", manager_id, len(to_add), len(removed))
    return to_add, removed


def apply_action(db: Session, actor: User, seller: User, action) -> str:
    """
    Run one seller action and log it. Returns the confirmation message.

    Raises ActionError when the payload does not fit the action. The caller
    commits.
    """
    profile = seller.profile
    if profile is None:
        raise ActionError("Seller has no profile")

    if action.action == "suspend_user":
        if action.suspend is None:
            raise ActionError("suspend is required")
        profile.is_suspended = action.suspend
        if action.suspend:
            profile.is_online = False
        label = "Suspendeu usuário" if action.suspend else "Reativou usuário"
        log_action(db, actor.id, seller.id, label, "suspension", {"suspended": action.suspend})
        return "Usuário suspenso" if action.suspend else "Usuário reativado"

    if action.action == "change_plan":
        if action.plan is None:
            raise ActionError("plan is required")
        old_plan = profile.current_plan
        profile.current_plan = action.plan
        log_action(db, actor.id, seller.id, f"Alterou plano para {action.plan.value}", "plan_change",
                   {"new_plan": action.plan.value, "old_plan": getattr(old_plan, "value", old_plan)})
        return f"Plano alterado para {action.plan.value}"

    if action.action == "update_profile":
        updates = {k: v for k, v in (("full_name", action.full_name), ("phone", action.phone)) if v}
        if not updates:
            raise ActionError("Nenhum campo para atualizar")
        for field_name, value in updates.items():
            setattr(profile, field_name, value)
        log_action(db, actor.id, seller.id, "Atualizou perfil do usuário", "profile_update", updates)
        return "Perfil atualizado"

    if action.action == "update_email":
        if not action.email:
            raise ActionError("email is required")
        taken = db.query(User).filter(User.email == action.email, User.id != seller.id).first()
        if taken is not None:
            raise ActionError("Email already registered")
        old_email = seller.email
        seller.email = action.email
        profile.email = action.email
        log_action(db, actor.id, seller.id, f"Alterou email para {action.email}", "email_change",
                   {"new_email": action.email, "old_email": old_email})
        return "Email atualizado"

    raise ActionError("Ação inválida")
