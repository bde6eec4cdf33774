import os
from datetime import datetime

import pandas as pd
from airflow import DAG
from airflow.operators.python import PythonOperator

from cleaning import clean_injuries, from_frame, to_frame
from config import INJURIES_CSV, OUTPUT_DIR
from report import build_report, write_report


def clean_task(src=INJURIES_CSV, out_dir=OUTPUT_DIR):
    os.makedirs(out_dir, exist_ok=True)
    frame = to_frame(clean_injuries(src))

    # CSV for people, pickle for the next task (keeps absent values absent)
    frame.to_csv(os.path.join(out_dir, "injuries_clean.csv"), index=False)
    frame.to_pickle(os.path.join(out_dir, "injuries_clean.pkl"))
    return len(frame)


def report_task(out_dir=OUTPUT_DIR):
    records = from_frame(pd.read_pickle(os.path.join(out_dir, "injuries_clean.pkl")))
    tables = build_report(records)
    write_report(tables, os.path.join(out_dir, "tables"))
    return sorted(tables)


with DAG(
    "nba_injury_report",
    start_date=datetime(2025, 11, 1),
    schedule=None,
    catchup=False,
) as dag:

    clean_injuries_op = PythonOperator(
        task_id="clean_injuries",
        python_callable=clean_task,
        op_kwargs={"src": INJURIES_CSV, "out_dir": OUTPUT_DIR},
    )

    build_report_op = PythonOperator(
        task_id="build_report",
        python_callable=report_task,
        op_kwargs={"out_dir": OUTPUT_DIR},
    )

    clean_injuries_op >> build_report_op
