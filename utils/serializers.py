def _money(value):
    return float(value) if value is not None else None


def serialize_slot(s):
    return {
        "id": s.id,
        "date": s.date.isoformat(),
        "time": s.time,
        "available": s.available,
        "booked": s.booked,
        "remaining": s.remaining,
    }


def serialize_experience(e, with_slots=True):
    out = {
        "id": e.id,
        "title": e.title,
        "description": e.description,
        "image": e.image,
        "location": e.location,
        "price": _money(e.price),
        "rating": e.rating,
        "review_count": e.review_count,
        "amenities": list(e.amenities or []),
        "created_at": e.created_at.isoformat(),
    }
    if with_slots:
        out["slots"] = [serialize_slot(s) for s in e.slots]
    return out


def serialize_booking(b, experience=None):
    out = {
        "id": b.id,
        "user_id": b.user_id,
        "experience_id": b.experience_id,
        "first_name": b.first_name,
        "last_name": b.last_name,
        "email": b.email,
        "phone": b.phone,
        "date": b.date.isoformat(),
        "time": b.time,
        "guests": b.guests,
        "total_price": _money(b.total_price),
        "promo_code": b.promo_code,
        "discount": _money(b.discount),
        "status": b.status,
        "created_at": b.created_at.isoformat(),
    }
    if experience is not None:
        out["experience"] = {
            "id": experience.id,
            "title": experience.title,
            "location": experience.location,
            "image": experience.image,
        }
    return out


def serialize_quote(q):
    return {
        "experience_id": q.experience.id,
        "date": q.slot.date.isoformat(),
        "time": q.slot.time,
        "guests": q.guests,
        "unit_price": _money(q.unit_price),
        "subtotal": _money(q.subtotal),
        "discount": _money(q.discount),
        "total_price": _money(q.total_price),
        "promo_code": q.promo.code if q.promo is not None else None,
        "remaining": q.slot.remaining,
    }
