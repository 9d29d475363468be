"""
Create an admin account with its profile.

Uso:
    ADMIN_EMAIL=admin@nexo.app ADMIN_PASSWORD=... python create_admin.py
"""
import os
import sys

from app.database import session_scope
from app.models.user import User, AppRole
from app.models.profile import Profile
from app.auth.security import hash_password

email = os.getenv("ADMIN_EMAIL")
password = os.getenv("ADMIN_PASSWORD")
if not email or not password:
    sys.exit("ADMIN_EMAIL e ADMIN_PASSWORD são obrigatórios")

with session_scope() as db:
    if db.query(User).filter(User.email == email).first():
        sys.exit(f"Usuário já existe: {email}")
    user = User(email=email, password_hash=hash_password(password), role=AppRole.ADMIN)
    user.profile = Profile(email=email, full_name="Administrador")
    db.add(user)
    db.flush()
    admin_id = user.id

print(f"Admin criado: id={admin_id}")
