import uuid
from datetime import datetime

from sqlalchemy import Column, String, BigInteger, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base


class SupportingDocument(Base):
    __tablename__ = "supporting_documents"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    claim_id = Column(
        Uuid,
        ForeignKey("claims.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    file_name = Column(String, nullable=False)
    content_type = Column(String, nullable=False)
    size_bytes = Column(BigInteger, nullable=False)
    # opaque blob-store handle, never an absolute path
    storage_path = Column(String, nullable=False)
    uploaded_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    claim = relationship("Claim", back_populates="documents")
