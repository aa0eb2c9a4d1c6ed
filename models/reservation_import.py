"""
Import of exported reservation documents.

Exported documents use camelCase keys and whatever date shape the exporting
client wrote. Dates are normalized here, at the store boundary; documents
whose date cannot be interpreted are skipped.
"""

import json
import logging
from collections.abc import Mapping
from datetime import datetime, timezone

from utils.datetime_helpers import normalize_date
from utils.helpers import parse_price
from .pricing import DEFAULT_DOWNPAYMENT_RATIO, calculate_downpayment
from .reservation import add_reservation

logger = logging.getLogger(__name__)

LEGACY_FIELDS = {
    'userId': 'user_id',
    'userEmail': 'user_email',
    'timeLabel': 'time_label',
    'packName': 'pack_name',
    'packPrice': 'pack_price',
    'packagePriceNum': 'package_price_num',
    'addonsTotal': 'addons_total',
    'remainingBalance': 'remaining_balance',
    'totalAmount': 'total_amount',
    'paymentMethod': 'payment_method',
    'createdAt': 'created_at',
    'cancelledAt': 'cancelled_at',
}


def load_documents(path: str) -> list:
    """
    Read an export file.

    Accepts a JSON list of documents or an object keyed by document id.
    """
    with open(path, encoding='utf-8') as handle:
        payload = json.load(handle)
    if isinstance(payload, Mapping):
        return [dict(doc, id=doc_id) for doc_id, doc in payload.items() if isinstance(doc, Mapping)]
    if isinstance(payload, list):
        return [doc for doc in payload if isinstance(doc, Mapping)]
    raise ValueError(f'{path} does not contain reservation documents')


def legacy_to_record(document: Mapping, ratio: float = DEFAULT_DOWNPAYMENT_RATIO) -> dict | None:
    """
    Convert an exported document into a reservation record.

    Missing pricing fields are derived from the package price and add-ons.

    Returns:
        Record dict, or None when the document has no owner, no usable date
        or an out-of-range timestamp
    """
    record = {}
    for key, value in document.items():
        record[LEGACY_FIELDS.get(key, key)] = value

    if not record.get('user_id'):
        return None

    day = normalize_date(record.get('date'))
    if day is None:
        return None
    record['date'] = _datetime_or_date(record.get('date'), day)

    for key in ('created_at', 'cancelled_at'):
        if key in record:
            try:
                record[key] = _timestamp_text(record[key])
            except ValueError:
                return None

    addons = [a for a in record.get('addons') or [] if isinstance(a, Mapping)]
    record['addons'] = [{'name': a.get('name'), 'price': parse_price(a.get('price'))} for a in addons]

    package_price = record.get('package_price_num')
    if _is_number(package_price):
        package_price = parse_price(package_price)
    else:
        package_price = parse_price(record.get('pack_price'))
    addons_total = sum(a['price'] for a in record['addons'])
    downpayment = record.get('downpayment')
    if _is_number(downpayment):
        downpayment = parse_price(downpayment)
    else:
        downpayment = calculate_downpayment(package_price, ratio)

    record.update(
        package_price_num=package_price,
        addons_total=addons_total,
        downpayment=downpayment,
        remaining_balance=package_price - downpayment,
        total_amount=package_price + addons_total,
    )
    record.setdefault('status', 'pending')
    return record


def import_reservations(documents, ratio: float = DEFAULT_DOWNPAYMENT_RATIO) -> tuple:
    """
    Import exported documents.

    Returns:
        (imported, skipped) counts
    """
    imported = skipped = 0
    for document in documents:
        record = legacy_to_record(document, ratio)
        if record is None:
            logger.warning(f"[Import] Skipping document {document.get('id')}: missing owner or unusable date")
            skipped += 1
            continue
        add_reservation(record)
        imported += 1
    return imported, skipped


def _datetime_or_date(raw, day):
    """Keep the event time when the raw value carries one."""
    if isinstance(raw, str) and 'T' in raw:
        try:
            return datetime.fromisoformat(raw.replace('Z', '+00:00'))
        except ValueError:
            return day
    return day


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _timestamp_text(value) -> str | None:
    """
    Render an exported timestamp as ISO text.

    Raises:
        ValueError: when the timestamp is out of range
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        seconds = value.get('seconds', value.get('_seconds'))
        if not _is_number(seconds):
            return None
    elif _is_number(value):
        seconds = value / 1000
    else:
        return None
    try:
        return datetime.fromtimestamp(seconds, timezone.utc).isoformat()
    except (OverflowError, OSError, ValueError):
        raise ValueError(f'Timestamp out of range: {value!r}') from None
