from .summary_store import SummaryStore, dump_summary, load_summary

__all__ = ["SummaryStore", "dump_summary", "load_summary"]
