
# Tariff Schemas
from .tariff_schema import TariffRecord, TariffQuery, TariffResponse

# Webhook Schemas
from .webhook_schema import WebhookEntity, WebhookData, WebhookPayload, WebhookResult
