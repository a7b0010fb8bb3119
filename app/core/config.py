## config do ambiente (variaveis de ambiente)
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict

# Definimos as configurações base da aplicação
class Settings(BaseSettings):
    # O model_config especifica onde Pydantic deve buscar as variáveis (do .env)
    model_config = SettingsConfigDict(
        env_file='.env',
        case_sensitive=True, # Garante que as chaves sejam lidas exatamente como estão no .env
        extra='ignore' # Ignora chaves que existam no ambiente, mas não na classe
    )

    # ----------------------------------------------------
    # 1. CONFIGURAÇÕES GERAIS DO PROJETO E DO SERVIDOR
    # ----------------------------------------------------
    ENV: str
    SECRET_KEY: str
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # ----------------------------------------------------
    # 2. CONFIGURAÇÕES DO BANCO DE DADOS
    # ----------------------------------------------------
    # A URL completa é a forma preferida para conexão
    DATABASE_URL: str

    # ----------------------------------------------------
    # 3. AUTENTICAÇÃO
    # ----------------------------------------------------
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # ----------------------------------------------------
    # 4. INTEGRAÇÃO WHATSAPP (webhook N8N)
    # ----------------------------------------------------
    WHATSAPP_REQUEST_TIMEOUT: int = 30


# Cria uma instância única da classe Settings para ser importada em toda a aplicação
settings = Settings()
