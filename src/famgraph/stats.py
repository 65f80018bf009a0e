"""Population statistics."""

from datetime import date

from famgraph.config import settings
from famgraph.dates import age
from famgraph.graph import GraphSnapshot
from famgraph.models import Sex, StatsData

AGE_BUCKETS = ["<50", "50-59", "60-69", "70-79", "80-89", "90-99", "100+"]
UNKNOWN_AGE = "unknown"


def age_bucket(years: int | None) -> str:
    if years is None:
        return UNKNOWN_AGE
    if years < 50:
        return "<50"
    if years >= 100:
        return "100+"
    low = years // 10 * 10
    return f"{low}-{low + 9}"


def compute_stats(
    snapshot: GraphSnapshot,
    today: date | None = None,
    limit: int | None = None,
    min_age: int | None = None,
) -> StatsData:
    """
    Single pass over the population: sex and alive/deceased counts, an age
    histogram and the longest-lived people.

    Ages run to the death date for the deceased and to `today` for the
    living. People whose age cannot be computed land in the "unknown" bucket,
    so the histogram always sums to the population size. The longest-lived
    list keeps up to `limit` people aged at least `min_age`, oldest first,
    ties by id.
    """
    if today is None:
        today = date.today()
    if limit is None:
        limit = settings.longest_lived_limit
    if min_age is None:
        min_age = settings.longest_lived_min_age

    male_count = female_count = alive_count = deceased_count = 0
    age_distribution = {bucket: 0 for bucket in [*AGE_BUCKETS, UNKNOWN_AGE]}
    longest_lived: list[tuple[int, int]] = []

    for person in snapshot:
        if person.sex is Sex.MALE:
            male_count += 1
        else:
            female_count += 1

        if person.is_alive:
            alive_count += 1
            years = age(person.birth, today)
        else:
            deceased_count += 1
            years = age(person.birth, person.death)

        age_distribution[age_bucket(years)] += 1
        if years is not None and years >= min_age:
            longest_lived.append((person.id, years))

    longest_lived.sort(key=lambda entry: (-entry[1], entry[0]))

    return StatsData(
        total_persons=len(snapshot),
        male_count=male_count,
        female_count=female_count,
        alive_count=alive_count,
        deceased_count=deceased_count,
        age_distribution=age_distribution,
        longest_lived=longest_lived[:limit],
    )
