# app/services/webhook_service.py

from datetime import datetime, timezone
import requests

from app.core import logger, settings, ValidationError, EntityUpdateFailure, CallbackFailure
from app.schemas.tariff_schema import TariffRecord
from app.schemas.webhook_schema import WebhookPayload, WebhookEntity
from .tariff_catalog_service import TariffStore, build_query, lookup_tariffs_service, select_best_match

# Written to the entity when no tariff category applies
UNKNOWN_INSTALLATION = "unknown installation"


def _commissioning_day(value: str | None) -> str | None:
    # The workflow may send a full timestamp ("2024-05-01T00:00:00.000Z")
    if value and "T" in value:
        return value.split("T", 1)[0]
    return value


def find_best_tariff(store: TariffStore, entity: WebhookEntity) -> TariffRecord | None:
    """
    Looks up the entity's tariffs and reduces them to one record.
    Entities missing the energy source (or carrying malformed values) get no match.
    """
    try:
        query = build_query(
            entity.energietraeger,
            _commissioning_day(entity.inbetriebnahme),
            entity.leistung_kw,
        )
    except ValidationError as e:
        logger.warning(f"⚠️ Entity {entity.entity_id} cannot be matched: {e.reason}")
        return None

    response = lookup_tariffs_service(store, query)
    return select_best_match(response.records, query.power_output)


def build_entity_update(best: TariffRecord | None, processed_at: datetime | None = None) -> dict:
    processed_at = processed_at or datetime.now(timezone.utc)
    update = {
        "processed_at": processed_at.isoformat(),
        "tariff_category": best.category_code if best else UNKNOWN_INSTALLATION,
    }
    if best is not None:
        update["mieterstromzuschlag_ctkwh"] = best.tenant_power_surcharge
        update["ausfall_verguetung_in_ctkwh"] = best.fallback_payment
        update["anzulegender_wert_in_ctkwh"] = best.reference_value
        update["einspeise_verguetung_in_ctkwh"] = best.feed_in_tariff
    return update


def patch_entity(entity: WebhookEntity, update: dict, token: str) -> None:
    url = f"{settings.ENTITY_API_URL.rstrip('/')}/v1/entity/{entity.entity_schema}/{entity.entity_id}"
    try:
        response = requests.patch(
            url,
            json=update,
            headers={"Authorization": f"Bearer {token}"},
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"❌ Could not update entity {entity.entity_id}: {e}")
        raise EntityUpdateFailure() from e


def resume_execution(callback_url: str, resume_token: str) -> None:
    """Un-blocks the waiting workflow. Any failure is fatal for the invocation."""
    logger.info(f"Calling workflow callback: {callback_url}")
    try:
        response = requests.post(
            callback_url,
            json={"resume_token": resume_token},
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        logger.error(f"❌ Failed to resume workflow execution: {e}")
        raise CallbackFailure() from e

    if not response.ok:
        logger.error(f"❌ Callback failed: {response.status_code} {response.reason}")
        raise CallbackFailure()

    logger.info("✅ Workflow execution resumed")


def process_webhook_service(store: TariffStore, payload: WebhookPayload, token: str) -> TariffRecord | None:
    """
    Applies the best tariff to the entity and resumes the workflow.
    Returns the applied record, or None when the entity got the unknown marker.
    """
    entity = payload.data.entity
    logger.info(
        f"Webhook for entity {entity.entity_id}: energyType={entity.energietraeger}, "
        f"commissioningDate={entity.inbetriebnahme}, powerOutput={entity.leistung_kw}"
    )

    best = find_best_tariff(store, entity)
    patch_entity(entity, build_entity_update(best), token)
    resume_execution(payload.data.callback_post_url, payload.data.resume_token)
    return best
