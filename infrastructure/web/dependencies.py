import sqlite3
from typing import Optional

from fastapi import Depends, Header, Request

from config.settings import Settings
from core.services.image_provider import ImageProvider
from core.services.payment_provider import PaymentProvider
from core.services.token_service import TokenService
from infrastructure.db.sqlite import SQLiteUserRepository


def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_db(settings: Settings = Depends(get_settings)):
    conn = sqlite3.connect(settings.DB_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()

def get_user_repo(conn: sqlite3.Connection = Depends(get_db)) -> SQLiteUserRepository:
    return SQLiteUserRepository(conn)

def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service

# шлюз и генератор создаются один раз в create_app
def get_payment_provider(request: Request) -> PaymentProvider:
    return request.app.state.payment_provider

def get_image_provider(request: Request) -> ImageProvider:
    return request.app.state.image_provider

def get_current_user_id(
    token: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> int:
    # заголовок называется именно "token", не Authorization: Bearer
    return tokens.verify(token)
