import io

import matplotlib
matplotlib.use('Agg')
from matplotlib.figure import Figure
import pandas as pd
import seaborn as sns
from sqlalchemy.ext.asyncio import AsyncSession

from omnitrackr.schemas.auth import AuthContext
from omnitrackr.services import stats as stats_service
from omnitrackr.stores import activities as activity_store
from omnitrackr.utils.result import service_result

REPORT_COLUMNS = ["id", "title", "description", "category", "tags", "created_at", "updated_at"]


@service_result
async def get_category_dataframe(db: AsyncSession, ctx: AuthContext) -> pd.DataFrame:
    items = await stats_service.category_breakdown(db, ctx.user_id)
    return pd.DataFrame(
        [i.model_dump() for i in items],
        columns=["category_id", "category_name", "category_color", "activity_count"],
    )


@service_result
async def get_tag_dataframe(db: AsyncSession, ctx: AuthContext) -> pd.DataFrame:
    items = await stats_service.tag_distribution(db, ctx.user_id)
    return pd.DataFrame(
        [i.model_dump() for i in items],
        columns=["tag_id", "tag_name", "tag_color", "activity_count"],
    )


@service_result
async def get_timeline_dataframe(db: AsyncSession, ctx: AuthContext, days: int) -> pd.DataFrame:
    """Per-day counts over the whole window, days without activity filled with zero."""
    days = stats_service.check_days(days)
    points = await stats_service.daily_activity(db, ctx.user_id, days)

    end = pd.Timestamp.now(tz="UTC").normalize().tz_localize(None)
    window = pd.date_range(end=end, periods=days + 1, freq="D")
    counts = pd.Series({pd.Timestamp(p.date): p.count for p in points}, dtype="int64")
    df = counts.reindex(window, fill_value=0).rename_axis("date").reset_index(name="count")
    df["date"] = df["date"].dt.strftime("%Y-%m-%d")
    return df


@service_result
async def generate_csv_report(db: AsyncSession, ctx: AuthContext) -> str:
    activities = await activity_store.list_activities(db, ctx.user_id)
    df = pd.DataFrame(
        [
            {
                "id": a.id,
                "title": a.title,
                "description": a.description or "",
                "category": a.category.name if a.category else "",
                "tags": ";".join(t.name for t in a.tags),
                "created_at": a.created_at,
                "updated_at": a.updated_at,
            }
            for a in activities
        ],
        columns=REPORT_COLUMNS,
    )
    return df.to_csv(index=False)


def _to_png(fig: Figure) -> io.BytesIO:
    buf = io.BytesIO()
    fig.savefig(buf, format="png", bbox_inches="tight")
    buf.seek(0)
    return buf


def generate_category_pie(df: pd.DataFrame) -> io.BytesIO | None:
    used = df[df["activity_count"] > 0]
    if used.empty:
        return None

    # Thread-safe plotting using OO API
    fig = Figure(figsize=(6, 6))
    ax = fig.subplots()
    ax.pie(
        used["activity_count"],
        labels=used["category_name"],
        colors=used["category_color"],
        autopct="%1.1f%%",
        startangle=90,
    )
    ax.set_title("Activities by category")
    return _to_png(fig)


def generate_tag_bar(df: pd.DataFrame) -> io.BytesIO | None:
    if df.empty or df["activity_count"].sum() == 0:
        return None

    fig = Figure(figsize=(10, 5))
    ax = fig.subplots()
    sns.barplot(data=df, x="tag_name", y="activity_count", color="steelblue", ax=ax)
    ax.set_title("Activities per tag")
    ax.set_xlabel("Tag")
    ax.set_ylabel("Activities")
    ax.tick_params(axis='x', rotation=45)
    return _to_png(fig)


def generate_timeline_chart(df: pd.DataFrame) -> io.BytesIO | None:
    if df.empty or df["count"].sum() == 0:
        return None

    fig = Figure(figsize=(12, 5))
    ax = fig.subplots()
    sns.barplot(data=df, x="date", y="count", color="seagreen", ax=ax)
    ax.set_title(f"Activities created per day (last {len(df) - 1} days)")
    ax.set_xlabel("Day")
    ax.set_ylabel("Activities")
    # Keep roughly a dozen date labels whatever the window size
    step = max(1, len(df) // 12)
    for i, label in enumerate(ax.get_xticklabels()):
        label.set_visible(i % step == 0)
    ax.tick_params(axis='x', rotation=45)
    return _to_png(fig)
