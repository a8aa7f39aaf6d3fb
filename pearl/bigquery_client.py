"""
BigQuery client for fetching journey activity.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import bigquery

logger = logging.getLogger(__name__)

JOURNEYS_TABLE = "journeys"

# Oyster exports use "02-Jan-06"; rows loaded by other tools use ISO dates.
SOURCE_DATE_FORMATS = ("%d-%b-%y", "%Y-%m-%d")


class BigQueryClientError(Exception):
    """Base exception for BigQuery client errors."""

    pass


@dataclass
class DayCount:
    """Number of journeys taken on a single day."""

    date: date
    count: int


def parse_source_date(value) -> date:
    """
    Normalise a date value from the journeys table.

    Args:
        value: A DATE/TIMESTAMP column value or a date string

    Returns:
        The calendar date

    Raises:
        BigQueryClientError: If the value matches no known format
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    for fmt in SOURCE_DATE_FORMATS:
        try:
            return datetime.strptime(str(value), fmt).date()
        except ValueError:
            continue

    raise BigQueryClientError(f"Parsing date {value!r}: unrecognised format")


class JourneyClient:
    """Client for querying Pearl journey data in BigQuery."""

    def __init__(self, project_id: str, dataset: str, client=None):
        """
        Initialize the journey client.

        Uses Application Default Credentials unless a client is supplied.

        Args:
            project_id: Google Cloud project holding the dataset
            dataset: Dataset containing the journeys table
            client: Optional pre-built bigquery.Client

        Raises:
            BigQueryClientError: If the BigQuery client cannot be created
        """
        self.project_id = project_id
        self.dataset = dataset

        if client is None:
            try:
                client = bigquery.Client(project=project_id)
            except (
                auth_exceptions.GoogleAuthError,
                google_exceptions.GoogleAPIError,
            ) as e:
                raise BigQueryClientError(f"Creating BigQuery client: {e}") from e
        self.client = client

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def close(self) -> None:
        """Release the underlying BigQuery client."""
        self.client.close()

    @property
    def table(self) -> str:
        return f"{self.project_id}.{self.dataset}.{JOURNEYS_TABLE}"

    def journey_counts_by_day(self) -> list[DayCount]:
        """
        Fetch the number of journeys per day, ordered by date.

        Returns:
            List of DayCount rows

        Raises:
            BigQueryClientError: If the query fails or a row has a bad date
        """
        query = (
            f"SELECT date, COUNT(*) AS journey_count FROM `{self.table}` "
            "GROUP BY date ORDER BY date"
        )

        try:
            rows = list(self.client.query(query).result())
        except (
            google_exceptions.GoogleAPIError,
            auth_exceptions.GoogleAuthError,
        ) as e:
            raise BigQueryClientError(f"Executing query: {e}") from e

        logger.debug("Fetched %d day rows from %s", len(rows), self.table)

        return [
            DayCount(date=parse_source_date(row["date"]), count=int(row["journey_count"]))
            for row in rows
        ]

    def fetch_activity(self) -> dict[str, int]:
        """
        Fetch journey counts keyed by ISO date.

        Every row is returned, including any dated after today; the largest
        count that scales heatmap levels is taken over the whole table. Rows
        that normalise to the same day are summed.

        Returns:
            Mapping of "YYYY-MM-DD" to journey count

        Raises:
            BigQueryClientError: If the data cannot be fetched
        """
        activity: dict[str, int] = {}
        for day_count in self.journey_counts_by_day():
            key = day_count.date.isoformat()
            activity[key] = activity.get(key, 0) + day_count.count
        return activity
