# app/utils/conflict.py
def overlaps(start_a, end_a, start_b, end_b):
    """
    Half-open [start, end) intervals on the same day.
    Adjacent slots (08:00-09:00 / 09:00-10:00) do not overlap.
    """
    return max(start_a, start_b) < min(end_a, end_b)


def find_conflict(existing_entries, start_time, end_time):
    """
    existing_entries: entries of the same day and scope, in time order
    returns the first one overlapping [start_time, end_time), or None
    """
    for e in existing_entries:
        if overlaps(e.start_time, e.end_time, start_time, end_time):
            return e
    return None
