"""Calendar view - bucket unified tasks into planner day sections and month grids."""

import calendar
from datetime import date, timedelta
from typing import Optional

from pydantic import BaseModel, Field

from planner.models.unified_task import TaskStatus, UnifiedTask
from planner.utils.config import PlannerConfig
from planner.utils.logging import get_structured_logger
from planner.utils.timestamps import local_day

logger = get_structured_logger(__name__)

DAYS_IN_WEEK = 7


class DaySection(BaseModel):
    """One day column of the weekly planner."""
    day: date
    label: str
    tasks: list[UnifiedTask] = Field(default_factory=list)
    is_today: bool = False
    is_past: bool = False


class CalendarBuckets(BaseModel):
    """
    Weekly planner view.

    Every visible task is in exactly one of ``overdue``, ``today``,
    ``tomorrow``, one ``week_days`` section, or ``later``.
    """
    overdue: list[UnifiedTask] = Field(default_factory=list)
    today: list[UnifiedTask] = Field(default_factory=list)
    tomorrow: list[UnifiedTask] = Field(default_factory=list)
    week_days: list[DaySection] = Field(default_factory=list)
    later: list[UnifiedTask] = Field(default_factory=list)

    def all_tasks(self) -> list[UnifiedTask]:
        week_tasks = [task for section in self.week_days for task in section.tasks]
        return [*self.overdue, *self.today, *self.tomorrow, *week_tasks, *self.later]


class MonthDay(BaseModel):
    """A day cell of the month picker."""
    day: date
    task_count: int = 0


def format_day_label(day: date) -> str:
    """Short label such as ``Sat, Jun 15``."""
    return f"{day:%a}, {day:%b} {day.day}"


def week_start_for(day: date, week_start_day: Optional[int] = None) -> date:
    """First day of the week containing ``day`` (Python weekday numbers)."""
    if week_start_day is None:
        week_start_day = PlannerConfig.week_start_day()
    return day - timedelta(days=(day.weekday() - week_start_day) % DAYS_IN_WEEK)


def _by_due_date(tasks: list[UnifiedTask]) -> list[UnifiedTask]:
    return sorted(tasks, key=lambda task: task.due_date)


def is_visible(task: UnifiedTask, today: date) -> bool:
    """Completed tasks stay on the planner only for the day they were completed."""
    if task.status != TaskStatus.COMPLETED:
        return True
    return task.completed_at is not None and local_day(task.completed_at) == today


def bucket_tasks(
    tasks: list[UnifiedTask],
    week_start: date,
    today: Optional[date] = None,
) -> CalendarBuckets:
    """
    Partition tasks into planner sections for the 7-day window at ``week_start``.

    Overdue, today and tomorrow take precedence over the window. Days after
    tomorrow that fall inside the window get their own section; anything
    else goes to ``later``. Completed tasks due in the past were completed
    today (see ``is_visible``) and are shown under today.
    """
    if today is None:
        today = date.today()
    tomorrow = today + timedelta(days=1)
    week_end = week_start + timedelta(days=DAYS_IN_WEEK - 1)

    buckets = CalendarBuckets()
    week_tasks: dict[date, list[UnifiedTask]] = {
        week_start + timedelta(days=offset): [] for offset in range(DAYS_IN_WEEK)
    }

    for task in tasks:
        if not is_visible(task, today):
            continue

        due_day = local_day(task.due_date)
        if due_day < today:
            if task.status == TaskStatus.COMPLETED:
                buckets.today.append(task)
            else:
                buckets.overdue.append(task)
        elif due_day == today:
            buckets.today.append(task)
        elif due_day == tomorrow:
            buckets.tomorrow.append(task)
        elif due_day in week_tasks:
            week_tasks[due_day].append(task)
        else:
            buckets.later.append(task)

    buckets.overdue = _by_due_date(buckets.overdue)
    buckets.today = _by_due_date(buckets.today)
    buckets.tomorrow = _by_due_date(buckets.tomorrow)
    buckets.later = _by_due_date(buckets.later)
    buckets.week_days = [
        DaySection(
            day=day,
            label=format_day_label(day),
            tasks=_by_due_date(day_tasks),
            is_today=day == today,
            is_past=day < today,
        )
        for day, day_tasks in week_tasks.items()
    ]

    if buckets.overdue:
        logger.debug("Overdue tasks on planner", overdue_count=len(buckets.overdue), week_start=week_start.isoformat())

    return buckets


def tasks_on_date(tasks: list[UnifiedTask], day: date) -> list[UnifiedTask]:
    """Tasks due on ``day``, earliest first."""
    return _by_due_date([task for task in tasks if local_day(task.due_date) == day])


def month_grid(
    tasks: list[UnifiedTask],
    year: int,
    month: int,
    week_start_day: Optional[int] = None,
) -> list[Optional[MonthDay]]:
    """
    Cells of the month picker: ``None`` for the blank cells before the 1st,
    then one ``MonthDay`` per day with the number of tasks due that day.
    """
    if week_start_day is None:
        week_start_day = PlannerConfig.week_start_day()

    first_day = date(year, month, 1)
    leading_blanks = (first_day.weekday() - week_start_day) % DAYS_IN_WEEK
    _, days_in_month = calendar.monthrange(year, month)

    counts: dict[date, int] = {}
    for task in tasks:
        due_day = local_day(task.due_date)
        if due_day.year == year and due_day.month == month:
            counts[due_day] = counts.get(due_day, 0) + 1

    cells: list[Optional[MonthDay]] = [None] * leading_blanks
    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        cells.append(MonthDay(day=day, task_count=counts.get(day, 0)))
    return cells


class PlannerCalendar:
    """
    Interaction state of the planner calendar.

    The week anchor and the displayed month move independently; selecting a
    date re-anchors the week so it contains that date. ``tasks`` is the
    filtered list shown in the week view; month counts use ``all_tasks``
    when given.
    """

    def __init__(
        self,
        tasks: Optional[list[UnifiedTask]] = None,
        today: Optional[date] = None,
        week_start_day: Optional[int] = None,
        all_tasks: Optional[list[UnifiedTask]] = None,
    ):
        self.tasks: list[UnifiedTask] = list(tasks or [])
        self.all_tasks: Optional[list[UnifiedTask]] = list(all_tasks) if all_tasks is not None else None
        self.today = today or date.today()
        self.week_start_day = PlannerConfig.week_start_day() if week_start_day is None else week_start_day
        self.week_start = week_start_for(self.today, self.week_start_day)
        self.current_month = self.today.replace(day=1)
        self.selected_date: Optional[date] = None

    def set_tasks(self, tasks: list[UnifiedTask], all_tasks: Optional[list[UnifiedTask]] = None) -> None:
        self.tasks = list(tasks)
        self.all_tasks = list(all_tasks) if all_tasks is not None else None

    def navigate_week(self, direction: str) -> date:
        """Move the week anchor by seven days; ``direction`` is ``next`` or ``prev``."""
        if direction not in ("next", "prev"):
            raise ValueError(f"Invalid direction: {direction!r}")
        step = DAYS_IN_WEEK if direction == "next" else -DAYS_IN_WEEK
        self.week_start += timedelta(days=step)
        return self.week_start

    def navigate_month(self, direction: str) -> date:
        """Show the next or previous month in the month picker."""
        if direction not in ("next", "prev"):
            raise ValueError(f"Invalid direction: {direction!r}")
        year, month = self.current_month.year, self.current_month.month
        month += 1 if direction == "next" else -1
        if month == 13:
            year, month = year + 1, 1
        elif month == 0:
            year, month = year - 1, 12
        self.current_month = date(year, month, 1)
        return self.current_month

    def go_to_today(self) -> None:
        self.week_start = week_start_for(self.today, self.week_start_day)
        self.selected_date = self.today

    def select_date(self, day: date) -> None:
        self.selected_date = day
        self.week_start = week_start_for(day, self.week_start_day)

    def clear_selection(self) -> None:
        self.selected_date = None

    def buckets(self) -> CalendarBuckets:
        return bucket_tasks(self.tasks, self.week_start, today=self.today)

    def selected_date_tasks(self) -> list[UnifiedTask]:
        if self.selected_date is None:
            return []
        return tasks_on_date(self.tasks, self.selected_date)

    def month_days(self) -> list[Optional[MonthDay]]:
        return month_grid(
            self.tasks if self.all_tasks is None else self.all_tasks,
            self.current_month.year,
            self.current_month.month,
            week_start_day=self.week_start_day,
        )
