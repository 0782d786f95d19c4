from ..extensions import db

class CreatedAtMixin:
    created_at = db.Column(db.DateTime, server_default=db.func.now(), nullable=False)

class TimestampMixin(CreatedAtMixin):
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())
