# database/dashboard.py
import math
from collections import Counter
from typing import Any, Dict

from sqlalchemy.orm import Session

from database.contacts import NEWEST_FIRST, OLDEST_FIRST
from database.models import Contact

TOP_FIRMS_LIMIT = 5
RECENT_CONTACTS_LIMIT = 5


def response_rate(reached_out: int, responded: int) -> float:
    """Percentage of reached-out contacts that responded, one decimal place, halves rounded up."""
    if reached_out == 0:
        return 0.0
    return math.floor(responded / reached_out * 100 * 10 + 0.5) / 10


def get_stats(db: Session, user_id: int) -> Dict[str, Any]:
    owned = db.query(Contact).filter(Contact.user_id == user_id)

    total = owned.count()
    reached_out = owned.filter(Contact.reached_out).count()
    responded = owned.filter(Contact.responded).count()

    # Counter keeps first-encounter order among equal counts
    firms = Counter(
        firm for (firm,) in owned.with_entities(Contact.firm).order_by(*OLDEST_FIRST) if firm
    )
    top_firms = [{"name": name, "count": count} for name, count in firms.most_common(TOP_FIRMS_LIMIT)]

    recent = owned.order_by(*NEWEST_FIRST).limit(RECENT_CONTACTS_LIMIT).all()

    return {
        "total_contacts": total,
        "reached_out": reached_out,
        "responded": responded,
        "response_rate": response_rate(reached_out, responded),
        "top_firms": top_firms,
        "recent_contacts": [
            {
                "id": contact.id,
                "name": contact.full_name,
                "firm": contact.firm,
                "role": contact.role or contact.job_title,
                "reached_out": contact.reached_out,
                "responded": contact.responded,
            }
            for contact in recent
        ],
    }
