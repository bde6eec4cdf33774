import argparse
import logging
import sys

from pyspark.sql import SparkSession
from pyspark.sql.functions import (
    array,
    asc_nulls_last,
    coalesce,
    col,
    date_format,
    dayofweek,
    desc,
    element_at,
    explode,
    instr,
    length,
    lit,
    lower,
    month,
    split,
    to_date,
    trim,
    when,
    year,
)
from pyspark.sql.types import LongType, StringType, StructField, StructType

from config import (
    ACQUIRED,
    COLUMN_ALIASES,
    DATE,
    HAMSTRING_KEYWORD,
    KNEE_KEYWORD,
    LOG_LEVEL,
    MONTH_LABELS,
    NOTES,
    OPTIONAL_COLUMNS,
    PLAYER,
    REQUIRED_COLUMNS,
    REST_KEYWORD,
    TEAM,
    WEEKDAY_LABELS,
)
from errors import InjuryDataError, MalformedRowError, MissingColumnError

logger = logging.getLogger(__name__)

# Spark patterns matching config.DATE_FORMATS, same order. Single letters
# accept one or two digits when parsing, like strptime %m and %d.
SPARK_DATE_PATTERNS = ["yyyy-M-d", "M/d/yyyy", "d/M/yyyy"]


def build_spark(app="NBA Injuries Clean", master=None):
    builder = SparkSession.builder.appName(app)
    if master:
        builder = builder.master(master)
    return (
        # unparseable dates come back null instead of raising
        builder.config("spark.sql.ansi.enabled", "false")
        .config("spark.sql.legacy.timeParserPolicy", "CORRECTED")
        .getOrCreate()
    )


def with_row_index(df):
    """Append the 0-based position of each row in input order as "row"."""
    schema = StructType(df.schema.fields + [StructField("row", LongType(), False)])
    rdd = df.rdd.zipWithIndex().map(lambda p: tuple(p[0]) + (p[1],))
    return df.sparkSession.createDataFrame(rdd, schema)


def normalize_cols(df):
    # Standardize column names if variants exist
    for c in df.columns:
        dst = COLUMN_ALIASES.get(c.strip().lower())
        if dst and dst not in df.columns:
            df = df.withColumnRenamed(c, dst)

    for req in REQUIRED_COLUMNS:
        if req not in df.columns:
            raise MissingColumnError(req, df.columns)
    for opt in OPTIONAL_COLUMNS:
        if opt not in df.columns:
            df = df.withColumn(opt, lit(None).cast(StringType()))

    # Blank is absent. Notes are kept verbatim.
    for c in [DATE, TEAM, PLAYER, ACQUIRED]:
        df = df.withColumn(c, when(trim(col(c)) == "", None).otherwise(trim(col(c))))
    df = df.withColumn(NOTES, when(trim(col(NOTES)) == "", None).otherwise(col(NOTES)))

    # Try multiple patterns then coalesce
    df = df.withColumnRenamed(DATE, "date_raw")
    return df.withColumn(
        DATE, coalesce(*[to_date(col("date_raw"), p) for p in SPARK_DATE_PATTERNS])
    )


def check_dates(df):
    """Raise MalformedRowError for the first row whose date did not parse."""
    bad = df.filter(col(DATE).isNull())
    n_bad = bad.count()
    if n_bad:
        first = bad.orderBy("row").select("row", "date_raw").first()
        raise MalformedRowError(first["row"], first["date_raw"], bad_rows=n_bad)
    return df


def derive_fields(df):
    """Drop Acquired rows and add the same derived columns as cleaning.normalize_record."""
    df = df.filter(col(ACQUIRED).isNull())

    notes = coalesce(col(NOTES), lit(""))
    pos = instr(notes, " (")
    rest = notes.substr(pos + 2, length(notes))
    cause = when(pos == 0, notes).otherwise(notes.substr(lit(1), pos - 1))
    status = when(pos == 0, lit(None).cast(StringType())).otherwise(
        when(rest.endswith(")"), rest.substr(lit(1), length(rest) - 1)).otherwise(rest)
    )

    return df.select(
        "row",
        col(DATE).alias("date"),
        col(TEAM).alias("team"),
        col(PLAYER).alias("player"),
        notes.alias("notes"),
        year(col(DATE)).alias("year"),
        month(col(DATE)).alias("month"),
        date_format(col(DATE), "yyyy-MM").alias("year_month"),
        element_at(
            array(*[lit(m) for m in MONTH_LABELS]), month(col(DATE))
        ).alias("month_label"),
        # dayofweek is 1 for Sunday, WEEKDAY_LABELS start on Monday
        element_at(
            array(*[lit(d) for d in WEEKDAY_LABELS]), (dayofweek(col(DATE)) + 5) % 7 + 1
        ).alias("weekday"),
        notes.contains(REST_KEYWORD).alias("is_rest"),
        cause.alias("cause"),
        status.alias("status"),
        notes.contains(HAMSTRING_KEYWORD).alias("is_hamstring"),
        cause.contains(KNEE_KEYWORD).alias("is_knee"),
    )


def count_by(df, *keys, top=None, stop_tokens=()):
    """Grouped counts, ordered by count descending then key ascending, nulls last."""
    keys = list(keys)
    if "cause_token" in keys:
        df = df.withColumn("cause_token", explode(split(lower(col("cause")), r"\s+")))
        df = df.filter(col("cause_token") != "")
        if stop_tokens:
            df = df.filter(~col("cause_token").isin(list(stop_tokens)))

    counts = df.groupBy(*keys).count().orderBy(
        desc("count"), *[asc_nulls_last(k) for k in keys]
    )
    if top is not None:
        counts = counts.limit(top)
    return counts


def load_injuries(spark, path):
    raw = spark.read.option("header", True).csv(path)
    df = check_dates(normalize_cols(with_row_index(raw)))
    return derive_fields(df)


def write_parquet(df, path, partitions=None, mode="overwrite"):
    if partitions:
        df.write.mode(mode).partitionBy(*partitions).parquet(path)
    else:
        df.write.mode(mode).parquet(path)


def main(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument("--raw-injuries", required=True, help="path to raw injuries CSV(s)")
    p.add_argument(
        "--clean-prefix",
        required=True,
        help="prefix for clean outputs, e.g. output/clean/",
    )
    p.add_argument("--master", default=None)
    args = p.parse_args(argv)

    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(message)s")
    spark = build_spark(master=args.master)

    try:
        injuries = load_injuries(spark, args.raw_injuries)
    except InjuryDataError as e:
        logger.error("%s: %s", args.raw_injuries, e)
        return 1

    base = args.clean_prefix.rstrip("/")
    # Partition by year for efficient pruning
    write_parquet(injuries, f"{base}/injuries", partitions=["year"])
    for key in ["team", "player", "year", "year_month", "status"]:
        write_parquet(count_by(injuries, key), f"{base}/counts_by_{key}")
    write_parquet(count_by(injuries, "cause_token"), f"{base}/counts_by_cause_token")

    logger.info("Wrote clean tables to: %s", base)
    return 0


if __name__ == "__main__":
    sys.exit(main())
