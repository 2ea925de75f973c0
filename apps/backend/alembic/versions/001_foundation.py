"""
============================================================
TARJETA CRC (Class / Responsibilities / Collaborators)
============================================================
Class: 001_foundation (Alembic Migration)

Responsibilities:
  - Crear el esquema completo desde cero (migración fundacional).
  - Identity: users + employee_permissions (un grant por empleado).
  - Tareas: tasks (recurrencia en JSONB + marcador last_reset_on), subtasks
    y task_completions (historial append-only).
  - Registros con retención: project_meetings, employee_tasks, daily_updates.

Collaborators:
  - PostgreSQL 16+
  - infrastructure/repositories/postgres/* (usan este esquema como contrato)

Policy:
  - Migración BASELINE: downgrade borra todo.
  - Convención de nombres:
      pk_<tabla>, uq_<tabla>_<col>, ix_<tabla>_<col>,
      fk_<tabla>_<col>__<ref_tabla>, ck_<tabla>_<regla>
  - project_id es una referencia opaca: los proyectos viven en otro
    subsistema, por eso no hay FK.
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_foundation"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_UUID = postgresql.UUID(as_uuid=True)

_TASK_KINDS = "('one-time', 'daily', 'weekly', 'monthly', 'recurring', 'custom')"
_TASK_STATUSES = "('pending', 'in_progress', 'completed')"
_APPROVAL_STATUSES = "('pending', 'approved', 'rejected', 'deadline_passed')"


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def _updated_at() -> sa.Column:
    return sa.Column(
        "updated_at",
        sa.DateTime(timezone=True),
        server_default=sa.text("now()"),
        nullable=False,
    )


def upgrade() -> None:
    """
    Orden:
      1) Identity (users, employee_permissions)
      2) Tareas (tasks, subtasks, task_completions)
      3) Registros con retención
    """

    # =========================================================
    # 1) IDENTITY
    # =========================================================
    op.create_table(
        "users",
        sa.Column("id", _UUID, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.Text, nullable=True),
        sa.Column(
            "role",
            sa.String(50),
            nullable=False,
            server_default=sa.text("'employee'"),
        ),
        sa.Column(
            "is_approved", sa.Boolean, nullable=False, server_default=sa.text("false")
        ),
        sa.Column(
            "profile_completed",
            sa.Boolean,
            nullable=False,
            server_default=sa.text("false"),
        ),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint(
            "role IN ('admin', 'employee', 'client', 'hackathon')",
            name="ck_users_role",
        ),
    )
    op.create_index("ix_users_role", "users", ["role"])

    op.create_table(
        "employee_permissions",
        sa.Column("employee_id", _UUID, nullable=False),
        sa.Column(
            "permissions",
            postgresql.ARRAY(sa.Text),
            nullable=False,
            server_default=sa.text("ARRAY[]::text[]"),
        ),
        # Otorgante borrado => NULL (la resolución degrada grantedBy a null).
        sa.Column("granted_by", _UUID, nullable=True),
        sa.Column("granted_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("employee_id", name="pk_employee_permissions"),
        sa.ForeignKeyConstraint(
            ["employee_id"],
            ["users.id"],
            name="fk_employee_permissions_employee_id__users",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["granted_by"],
            ["users.id"],
            name="fk_employee_permissions_granted_by__users",
            ondelete="SET NULL",
        ),
    )

    # =========================================================
    # 2) TAREAS
    # =========================================================
    op.create_table(
        "tasks",
        sa.Column("id", _UUID, nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("task_kind", sa.String(20), nullable=False),
        sa.Column("project_id", _UUID, nullable=True),
        sa.Column("assigned_to", _UUID, nullable=True),
        sa.Column(
            "assignees",
            postgresql.ARRAY(_UUID),
            nullable=False,
            server_default=sa.text("ARRAY[]::uuid[]"),
        ),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'pending'"),
        ),
        sa.Column(
            "approval_status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'pending'"),
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_by", _UUID, nullable=True),
        sa.Column("ticked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_by", _UUID, nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "custom_field_values",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("deadline_date", sa.Date, nullable=True),
        sa.Column("deadline_time", sa.String(5), nullable=True),
        sa.Column("recurring_pattern", postgresql.JSONB, nullable=True),
        sa.Column("custom_recurrence", postgresql.JSONB, nullable=True),
        # Idempotencia del scheduler: día (zona de la app) del último reset.
        sa.Column("last_reset_on", sa.Date, nullable=True),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id", name="pk_tasks"),
        sa.ForeignKeyConstraint(
            ["assigned_to"],
            ["users.id"],
            name="fk_tasks_assigned_to__users",
            ondelete="SET NULL",
        ),
        sa.CheckConstraint(f"task_kind IN {_TASK_KINDS}", name="ck_tasks_task_kind"),
        sa.CheckConstraint(f"status IN {_TASK_STATUSES}", name="ck_tasks_status"),
        sa.CheckConstraint(
            f"approval_status IN {_APPROVAL_STATUSES}",
            name="ck_tasks_approval_status",
        ),
    )
    op.create_index("ix_tasks_task_kind", "tasks", ["task_kind"])
    op.create_index("ix_tasks_assigned_to", "tasks", ["assigned_to"])
    op.create_index("ix_tasks_project_id", "tasks", ["project_id"])
    op.create_index(
        "ix_tasks_assignees_gin", "tasks", ["assignees"], postgresql_using="gin"
    )

    op.create_table(
        "subtasks",
        sa.Column("id", _UUID, nullable=False),
        sa.Column("task_id", _UUID, nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'pending'"),
        ),
        sa.Column("ticked", sa.Boolean, nullable=False, server_default=sa.text("false")),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_by", _UUID, nullable=True),
        sa.Column("ticked_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        _updated_at(),
        sa.PrimaryKeyConstraint("id", name="pk_subtasks"),
        sa.ForeignKeyConstraint(
            ["task_id"],
            ["tasks.id"],
            name="fk_subtasks_task_id__tasks",
            ondelete="CASCADE",
        ),
        sa.CheckConstraint(f"status IN {_TASK_STATUSES}", name="ck_subtasks_status"),
    )
    op.create_index("ix_subtasks_task_id", "subtasks", ["task_id"])

    # Historial: sin FK a tasks para sobrevivir al borrado de la tarea.
    op.create_table(
        "task_completions",
        sa.Column("id", _UUID, nullable=False),
        sa.Column("task_id", _UUID, nullable=False),
        sa.Column("task_title", sa.String(500), nullable=False),
        sa.Column("task_kind", sa.String(20), nullable=False),
        sa.Column("project_id", _UUID, nullable=True),
        sa.Column("assigned_to", _UUID, nullable=True),
        sa.Column(
            "assignees",
            postgresql.ARRAY(_UUID),
            nullable=False,
            server_default=sa.text("ARRAY[]::uuid[]"),
        ),
        sa.Column("completed_by", _UUID, nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ticked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approval_status", sa.String(20), nullable=False),
        sa.Column("deadline_date", sa.Date, nullable=True),
        sa.Column("deadline_time", sa.String(5), nullable=True),
        sa.Column(
            "custom_field_values",
            postgresql.JSONB,
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column(
            "not_ticked", sa.Boolean, nullable=False, server_default=sa.text("false")
        ),
        sa.Column(
            "recorded_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("subtask_id", _UUID, nullable=True),
        sa.Column("subtask_title", sa.String(500), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_task_completions"),
    )
    op.create_index(
        "ix_task_completions_task_recorded",
        "task_completions",
        ["task_id", "recorded_at"],
    )

    # =========================================================
    # 3) REGISTROS CON RETENCIÓN
    # =========================================================
    op.create_table(
        "project_meetings",
        sa.Column("id", _UUID, nullable=False),
        sa.Column("project_id", _UUID, nullable=True),
        sa.Column("title", sa.String(500), nullable=False),
        # Solo fecha: la retención compara por día en la zona de la app.
        sa.Column("meeting_date", sa.Date, nullable=False),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_project_meetings"),
    )
    op.create_index(
        "ix_project_meetings_meeting_date", "project_meetings", ["meeting_date"]
    )

    op.create_table(
        "employee_tasks",
        sa.Column("id", _UUID, nullable=False),
        sa.Column("employee_id", _UUID, nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column(
            "completed", sa.Boolean, nullable=False, server_default=sa.text("false")
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_employee_tasks"),
        sa.ForeignKeyConstraint(
            ["employee_id"],
            ["users.id"],
            name="fk_employee_tasks_employee_id__users",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_employee_tasks_completed_at",
        "employee_tasks",
        ["completed_at"],
        postgresql_where=sa.text("completed = true"),
    )

    op.create_table(
        "daily_updates",
        sa.Column("id", _UUID, nullable=False),
        sa.Column("employee_id", _UUID, nullable=False),
        sa.Column("project_id", _UUID, nullable=True),
        sa.Column("summary", sa.Text, nullable=False, server_default=sa.text("''")),
        _created_at(),
        sa.PrimaryKeyConstraint("id", name="pk_daily_updates"),
        sa.ForeignKeyConstraint(
            ["employee_id"],
            ["users.id"],
            name="fk_daily_updates_employee_id__users",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_daily_updates_created_at", "daily_updates", ["created_at"])


def downgrade() -> None:
    for table in (
        "daily_updates",
        "employee_tasks",
        "project_meetings",
        "task_completions",
        "subtasks",
        "tasks",
        "employee_permissions",
        "users",
    ):
        op.drop_table(table)
