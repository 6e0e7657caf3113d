# backend/app/models.py
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


def new_id() -> str:
    return str(uuid.uuid4())


# -----------------------------
# Identity
# -----------------------------
class AppUser(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    email: Mapped[Optional[str]] = mapped_column(String(200), nullable=True, unique=True, index=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    role: Mapped[str] = mapped_column(String(40), nullable=False, default="contributor")

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)


# -----------------------------
# Hierarchy: Portfolio -> Program
# -----------------------------
class Portfolio(Base):
    __tablename__ = "portfolios"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    owner_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")  # active|on_hold|completed|cancelled
    budget: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)  # cents

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)


class Program(Base):
    __tablename__ = "programs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    portfolio_id: Mapped[str] = mapped_column(String(36), ForeignKey("portfolios.id"), nullable=False, index=True)
    owner_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    budget: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)  # cents

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)


# -----------------------------
# Lookups
# -----------------------------
class Phase(Base):
    __tablename__ = "phases"
    __table_args__ = (Index("ix_phases_type_order", "type", "order"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)  # demand|project
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Status(Base):
    __tablename__ = "statuses"
    __table_args__ = (Index("ix_statuses_type_name", "type", "name"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)  # demand|project
    color: Mapped[str] = mapped_column(String(40), nullable=False, default="gray")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


# -----------------------------
# Program children
# -----------------------------
class Demand(Base):
    __tablename__ = "demands"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    program_id: Mapped[str] = mapped_column(String(36), ForeignKey("programs.id"), nullable=False, index=True)
    phase_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("phases.id"), nullable=True)
    status_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("statuses.id"), nullable=True)
    owner_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False)
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default="medium")  # high|medium|low
    requested_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    estimated_effort: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # hours
    business_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (CheckConstraint("progress >= 0 AND progress <= 100", name="ck_projects_progress_range"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    program_id: Mapped[str] = mapped_column(String(36), ForeignKey("programs.id"), nullable=False, index=True)

    # Plain column: a project outlives the demand it came from
    demand_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)

    phase_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("phases.id"), nullable=True)
    status_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("statuses.id"), nullable=True)
    owner_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False)
    project_manager_id: Mapped[Optional[str]] = mapped_column(String(64), ForeignKey("users.id"), nullable=True)
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default="medium")
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    budget: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)  # cents
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # 0..100

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)


class Product(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    program_id: Mapped[str] = mapped_column(String(36), ForeignKey("programs.id"), nullable=False, index=True)
    owner_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="in_development")
    version: Mapped[str] = mapped_column(String(40), nullable=False, default="1.0.0")
    launch_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    business_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)


class ProjectProduct(Base):
    __tablename__ = "project_products"
    __table_args__ = (UniqueConstraint("project_id", "product_id", name="uq_project_products_project_product"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    project_id: Mapped[str] = mapped_column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    product_id: Mapped[str] = mapped_column(String(36), ForeignKey("products.id"), nullable=False, index=True)


class Assignment(Base):
    __tablename__ = "assignments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    project_id: Mapped[str] = mapped_column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(60), nullable=False)  # team_member|contributor|reviewer|...
    assigned_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)


# -----------------------------
# Audit trail
# -----------------------------
class AuditLog(Base):
    __tablename__ = "audit_log"
    __table_args__ = (
        Index("ix_audit_log_entity", "entity_type", "entity_id"),
        Index("ix_audit_log_timestamp", "timestamp"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    entity_type: Mapped[str] = mapped_column(String(40), nullable=False)

    # NOT a foreign key: history must survive the entity it describes
    entity_id: Mapped[str] = mapped_column(String(64), nullable=False)

    change_type: Mapped[str] = mapped_column(String(20), nullable=False)  # created|updated|deleted|status_changed
    changed_by: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False)
    details: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
