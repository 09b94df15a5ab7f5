from dataclasses import dataclass
from os import getenv
from dotenv import load_dotenv


def split_list(value: str) -> list[str]:
    return [x.strip() for x in value.split(',') if x.strip()]


@dataclass(frozen=True)
class Config:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            load_dotenv()

            # Environment
            cls.environment = str(getenv('ENVIRONMENT', 'development')).lower()
            cls.production = cls.environment in ['production', 'prod']
            cls.port = int(getenv('PORT', 3000))

            # Shopify
            cls.webhook_secret_shopify = str(getenv('SHOPIFY_WEBHOOK_SECRET', ''))
            cls.store_url_shopify = str(getenv('SHOPIFY_STORE_URL', ''))
            cls.api_key_shopify = str(getenv('SHOPIFY_ADMIN_API_KEY', ''))
            cls.api_version_shopify = str(getenv('SHOPIFY_API_VERSION', '2024-01'))
            cls.ordered_tag = str(getenv('ORDERED_TAG', 'JARVIS - Ordered'))

            # Mail
            cls.mail_user = str(getenv('EMAIL', ''))
            cls.mail_password = str(getenv('PASSWORD', ''))
            cls.mail_from_name = str(getenv('MAIL_FROM_NAME', 'BeHope'))
            cls.mail_host = str(getenv('MAIL_HOST', 'smtp.gmail.com'))
            cls.mail_port = int(getenv('MAIL_PORT', 587))
            cls.mail_recipients = split_list(str(getenv('MAIL_RECIPIENTS', '')))
            # Risk and warning reviews go to the standard list unless overridden
            cls.mail_risk_recipients = split_list(str(getenv('MAIL_RISK_RECIPIENTS', ''))) or cls.mail_recipients
            cls.mail_warning_recipients = (
                split_list(str(getenv('MAIL_WARNING_RECIPIENTS', ''))) or cls.mail_recipients
            )

            # Rules
            cls.ruleset_version = str(getenv('RULESET_VERSION', ''))

            # Logs
            cls.logs_dir = str(getenv('LOGS_DIR', 'logs'))

        return cls._instance


config = Config()
