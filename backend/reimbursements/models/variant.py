from sqlalchemy import Column, Integer, Numeric, String

from reimbursements.db import Base


class Variant(Base):
    __tablename__ = "variants"

    id = Column(Integer, primary_key=True, index=True)
    sku = Column(String(64), unique=True, index=True, nullable=False)
    name = Column(String(256), nullable=False)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    stock = Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<Variant sku={self.sku} name={self.name}>"
