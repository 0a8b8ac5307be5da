from sqlalchemy.orm import Session

from carpool.models.user import User
from carpool.schemas.user import ProfileUpdateRequest
from carpool.utils.exceptions import NotFoundException


def _serialize_public(u: User) -> dict:
    return {
        "id":           u.id,
        "fullName":     u.fullName,
        "role":         u.role.value,
        "rating":       u.rating,
        "reviewsCount": u.reviewsCount,
        "car":          u.car_label or None,
        "createdAt":    u.createdAt.isoformat(),
    }


def _serialize_profile(u: User) -> dict:
    data = _serialize_public(u)
    data.update({
        "email":     u.email,
        "phone":     u.phone,
        "carBrand":  u.carBrand,
        "carModel":  u.carModel,
        "carYear":   u.carYear,
        "carColor":  u.carColor,
        "carNumber": u.carNumber,
        "updatedAt": u.updatedAt.isoformat(),
    })
    return data


class UserService:

    def get_profile(self, current_user: User) -> dict:
        return _serialize_profile(current_user)

    def get_public_profile(self, db: Session, user_id: int) -> dict:
        u = db.get(User, user_id)
        if not u:
            raise NotFoundException("User")
        return _serialize_public(u)

    def update_profile(self, db: Session, data: ProfileUpdateRequest, current_user: User) -> dict:
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in ("fullName", "phone"):
                continue
            setattr(current_user, field, value)
        db.commit()
        db.refresh(current_user)
        return _serialize_profile(current_user)
