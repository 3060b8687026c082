# -*- coding: utf-8 -*-
# @Author: Andreas Paepcke
# @Date:   2025-11-23 08:29:37
# @Last Modified by:   Andreas Paepcke
# @Last Modified time: 2026-10-16 15:12:09

from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
import time

# Seconds between the HFS epoch (1904-01-01) and the Unix epoch
HFS_EPOCH_DELTA = 2082844800
# dutc timestamps count 1/65536ths of a second
DUTC_TICKS_PER_SECOND = 65536

# --------------------- Context Managers ----------------

@contextmanager
def timed(label, log=None):
    '''
    Times the operation inside the with.

    Usage:
         with timed("parsing .DS_Store", log=log):
             result = parse(data)

      Output:
      Starting parsing .DS_Store
      Finished parsing .DS_Store: 0:00:00.004120 elapsed time

    :param label: short text describing the operation
    :param log: a LoggingService; if None, print() is used
    '''
    if log is not None:
        log_func = log.info
    else:
        log_func = print

    log_func(f"Starting {label}")
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_time = timedelta(seconds=time.perf_counter() - start)
        log_func(f"Finished {label}: {elapsed_time} elapsed time")

# ---------------------- Class Utils -------------------

class Utils:

    # --------------------- Mac Time Stamps ----------------

    @staticmethod
    def hfs_to_datetime(hfs_seconds: int) -> datetime:
        """Convert seconds since 1904-01-01 UTC (the HFS epoch) to a datetime.

        Args:
            hfs_seconds: Seconds since the HFS epoch

        Returns:
            Timezone-aware datetime in UTC
        """
        unix_seconds = hfs_seconds - HFS_EPOCH_DELTA
        return datetime.fromtimestamp(0, tz=timezone.utc) + timedelta(seconds=unix_seconds)

    @staticmethod
    def dutc_to_datetime(dutc: int) -> datetime:
        """Convert a 'dutc' value (1/65536 s ticks since 1904) to a datetime.

        Fractions of a second are dropped.

        Example:
            >>> Utils.dutc_to_datetime(3786912000 * 65536)
            datetime.datetime(2024, 1, 1, 0, 0, tzinfo=datetime.timezone.utc)
        """
        return Utils.hfs_to_datetime(dutc // DUTC_TICKS_PER_SECOND)

    @staticmethod
    def finder_date_str(when: datetime) -> str:
        '''
        Format a datetime the way the Finder shows dates,
        e.g. 'January 2, 2006 at 3:04 PM'. Avoids the
        platform-dependent '%-d' strftime flag.
        '''
        hour = when.hour % 12 or 12
        am_pm = 'AM' if when.hour < 12 else 'PM'
        return f"{when.strftime('%B')} {when.day}, {when.year} at {hour}:{when.minute:02d} {am_pm}"
