from .extensions import db
from datetime import datetime

# Everything the submitter may fill in; id and created_at are assigned here.
STORE_COLUMNS = (
    "name", "mobile", "area", "type", "other_type",
    "water_types", "other_water_type", "current_brand",
    "price_20l", "price_1l", "price_500ml", "monthly_20l", "daily_bottles",
    "problems", "switching_reasons", "cheaper_switch",
    "retailer_fastest_size", "retailer_margin", "retailer_credit",
    "retailer_willing_to_stock", "comments",
)


class SurveyResponse(db.Model):
    __tablename__ = "responses"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.Text, default="")
    mobile = db.Column(db.Text, default="")
    area = db.Column(db.Text, default="")
    type = db.Column(db.Text, default="Household")
    other_type = db.Column(db.Text, default="")
    water_types = db.Column(db.Text, default="[]")       # JSON array
    other_water_type = db.Column(db.Text, default="")
    current_brand = db.Column(db.Text, default="")
    price_20l = db.Column(db.Text, default="")
    price_1l = db.Column(db.Text, default="")
    price_500ml = db.Column(db.Text, default="")
    monthly_20l = db.Column(db.Text, default="")
    daily_bottles = db.Column(db.Text, default="")
    problems = db.Column(db.Text, default="[]")          # JSON array
    switching_reasons = db.Column(db.Text, default="[]") # JSON array
    cheaper_switch = db.Column(db.Text, default="")
    # retailer step only
    retailer_fastest_size = db.Column(db.Text, default="")
    retailer_margin = db.Column(db.Text, default="")
    retailer_credit = db.Column(db.Text, default="")
    retailer_willing_to_stock = db.Column(db.Text, default="")
    comments = db.Column(db.Text, default="")
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        row = {"id": self.id}
        for c in STORE_COLUMNS:
            row[c] = getattr(self, c)
        row["created_at"] = self.created_at.strftime("%Y-%m-%d %H:%M:%S") if self.created_at else None
        return row

    @classmethod
    def insert(cls, columns):
        """Add one row and commit; returns the persisted instance."""
        row = cls(**{k: v for k, v in columns.items() if k in STORE_COLUMNS})
        db.session.add(row)
        db.session.commit()
        return row

    @classmethod
    def list_recent(cls):
        """All rows as plain dicts, newest first."""
        q = cls.query.order_by(cls.created_at.desc(), cls.id.desc())
        return [r.to_dict() for r in q.all()]
