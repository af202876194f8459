from sqlalchemy.ext.asyncio import AsyncSession
from warehouse.models.support.activity_models import UserActivity
from warehouse.constants.activity_templates import ACTIVITY_TEMPLATES
from warehouse.constants.activity_codes import ActivityCode


async def emit_activity(
    db: AsyncSession,
    *,
    user_id: int | None,
    username: str,
    code: ActivityCode,
    **context,
):
    """Stage an activity row in the caller's transaction. Never commits."""
    template = ACTIVITY_TEMPLATES.get(code)
    if not template:
        raise ValueError(f"No activity template for code {code}")

    try:
        message = template.format(**context)
    except KeyError as e:
        raise ValueError(
            f"Missing activity context key: {e.args[0]} for {code}"
        )

    db.add(
        UserActivity(
            user_id=user_id,
            username_snapshot=username,
            code=code.value,
            message=message,
        )
    )


def actor_context(user) -> dict:
    return {
        "actor_role": user.role.capitalize(),
        "actor_username": user.username,
    }
