# db.py
"""
Scan history using SQLAlchemy (SQLite by default).

The repository is created by the caller and handed to whoever needs it; the
scoring engine never touches it. Only the newest ``capacity`` scans are kept.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, DateTime, Integer, Text, create_engine, func
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from phishscore.app.models import Classification
from phishscore.app.textmetrics import round_half_up

logger = logging.getLogger("history")

DEFAULT_CAPACITY = 50

Base = declarative_base()


class Scan(Base):
    __tablename__ = "scan_history"
    id = Column(Integer, primary_key=True, index=True)
    url = Column(Text)
    classification = Column(Text, index=True)
    risk_score = Column(Integer)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "url": self.url,
            "classification": self.classification,
            "risk_score": self.risk_score,
            "timestamp": self.created_at.isoformat(),
        }


class HistoryRepository:
    """Newest-first scan history with FIFO eviction at ``capacity``."""

    def __init__(self, database_url: str = "sqlite:///phishscore.db", capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        connect_args = {}
        kwargs = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                # one shared connection, otherwise every session sees an empty db
                kwargs["poolclass"] = StaticPool
        self.engine = create_engine(database_url, connect_args=connect_args, **kwargs)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)
        Base.metadata.create_all(bind=self.engine)

    def _ordered(self, session):
        # ids grow with insertion order
        return session.query(Scan).order_by(Scan.id.desc())

    def append(self, url: str, classification: Classification, risk_score: int) -> Dict[str, Any]:
        session = self.SessionLocal()
        try:
            scan = Scan(
                url=url,
                classification=Classification(classification).value,
                risk_score=int(risk_score),
            )
            session.add(scan)
            session.flush()
            stale = self._ordered(session).offset(self.capacity).all()
            for row in stale:
                session.delete(row)
            session.commit()
            if stale:
                logger.debug("Evicted %d old history entries", len(stale))
            return scan.to_dict()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def list(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        session = self.SessionLocal()
        try:
            query = self._ordered(session)
            if limit is not None:
                query = query.limit(limit)
            return [r.to_dict() for r in query.all()]
        finally:
            session.close()

    def get(self, scan_id: int) -> Optional[Dict[str, Any]]:
        session = self.SessionLocal()
        try:
            scan = session.query(Scan).filter(Scan.id == scan_id).first()
            return scan.to_dict() if scan else None
        finally:
            session.close()

    def remove(self, scan_id: int) -> bool:
        session = self.SessionLocal()
        try:
            deleted = session.query(Scan).filter(Scan.id == scan_id).delete()
            session.commit()
            return deleted > 0
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def clear(self) -> int:
        session = self.SessionLocal()
        try:
            deleted = session.query(Scan).delete()
            session.commit()
            logger.info("Cleared %d history entries", deleted)
            return deleted
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def stats(self) -> Dict[str, int]:
        session = self.SessionLocal()
        try:
            counts = dict(
                session.query(Scan.classification, func.count(Scan.id))
                .group_by(Scan.classification)
                .all()
            )
            total = sum(counts.values())
            avg = session.query(func.avg(Scan.risk_score)).scalar()
        finally:
            session.close()
        return {
            "total": total,
            "legitimate": counts.get(Classification.LEGITIMATE.value, 0),
            "suspicious": counts.get(Classification.SUSPICIOUS.value, 0),
            "phishing": counts.get(Classification.PHISHING.value, 0),
            "avg_risk": round_half_up(float(avg)) if avg is not None else 0,
        }
