from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk, messagebox, filedialog
from typing import List, Optional

from core import (
    PrizeSettings,
    Student,
    load_sample,
    resolve_students,
    summarize,
)

try:
    from viz import plot_summary
except Exception:
    plot_summary = None

logger = logging.getLogger("prizepicker.gui")

FILE_TYPES = [("CSV or TXT files", "*.csv *.txt"), ("All files", "*.*")]


# ============================================================
# File picker: path, or None when cancelled
# ============================================================
def select_input_source(parent: Optional[tk.Misc] = None) -> Optional[str]:
    owns_root = parent is None
    try:
        if owns_root:
            parent = tk.Tk()
            parent.withdraw()
        path = filedialog.askopenfilename(
            parent=parent,
            title="Select students CSV/TXT (name,gpa)",
            filetypes=FILE_TYPES,
        )
    except tk.TclError as e:
        # no display
        logger.warning("File dialog unavailable: %s", e)
        return None
    finally:
        if owns_root and parent is not None:
            try:
                parent.destroy()
            except tk.TclError:
                pass
    return path or None


# ============================================================
# Table helpers
# ============================================================
def _coerce_sort_value(col: str, v: str):
    if v is None:
        return ""
    s = str(v).strip()
    if col in ("rank", "gpa"):
        try:
            return float(s)
        except ValueError:
            return s
    return s.lower()


def attach_sortable_headings(tv: ttk.Treeview) -> None:
    tv._sort_state = {"col": None, "desc": False}

    def sort_by(col: str):
        items = list(tv.get_children(""))
        col_index = tv["columns"].index(col)

        data = []
        for idx, iid in enumerate(items):
            values = tv.item(iid, "values")
            val = values[col_index] if col_index < len(values) else ""
            data.append((iid, _coerce_sort_value(col, val), idx))  # idx keeps it stable

        if tv._sort_state["col"] == col:
            tv._sort_state["desc"] = not tv._sort_state["desc"]
        else:
            tv._sort_state["col"] = col
            tv._sort_state["desc"] = False

        data.sort(key=lambda x: (x[1], x[2]), reverse=tv._sort_state["desc"])
        for new_index, (iid, _val, _idx) in enumerate(data):
            tv.move(iid, "", new_index)

    for col in tv["columns"]:
        tv.heading(col, command=lambda c=col: sort_by(c))


def make_tree_with_vscroll(parent: ttk.Frame, *, columns: tuple[str, ...], show="headings", height=10) -> ttk.Treeview:
    parent.columnconfigure(0, weight=1)
    parent.rowconfigure(0, weight=1)

    tv = ttk.Treeview(parent, columns=columns, show=show, height=height)
    sb = ttk.Scrollbar(parent, orient="vertical", command=tv.yview)
    tv.configure(yscrollcommand=sb.set)

    tv.grid(row=0, column=0, sticky="nsew")
    sb.grid(row=0, column=1, sticky="ns")
    return tv


# ============================================================
# Results window
# ============================================================
class PrizeApp(tk.Tk):
    def __init__(self, settings: Optional[PrizeSettings] = None, students: Optional[List[Student]] = None):
        super().__init__()
        self.title("GPA Prize Picker")
        self.geometry("720x560")
        self.settings = settings or PrizeSettings()
        self.students: List[Student] = students if students else load_sample()
        self.source_var = tk.StringVar(value="Source: built-in sample")
        self.summary_var = tk.StringVar(value="")

        self._build_ui()
        self._refresh()

    def _build_ui(self) -> None:
        self.columnconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)
        self.rowconfigure(3, weight=1)

        top = ttk.Frame(self, padding=(10, 10, 10, 0))
        top.grid(row=0, column=0, sticky="ew")
        ttk.Button(top, text="Use built-in sample", command=self._use_sample).pack(side=tk.LEFT)
        ttk.Button(top, text="Load CSV/TXT…", command=self._load_file).pack(side=tk.LEFT, padx=(8, 0))
        ttk.Button(top, text="Plot", command=self._visualize).pack(side=tk.RIGHT)
        ttk.Label(top, textvariable=self.source_var).pack(side=tk.LEFT, padx=(12, 0))

        win_wrap = ttk.LabelFrame(self, text=f"Top GPA students (up to {self.settings.max_recipients})", padding=8)
        win_wrap.grid(row=1, column=0, sticky="nsew", padx=10, pady=(10, 0))
        self.tv_winners = make_tree_with_vscroll(win_wrap, columns=("rank", "name", "gpa"), height=6)
        self.tv_winners.heading("rank", text="#")
        self.tv_winners.heading("name", text="Name")
        self.tv_winners.heading("gpa", text="GPA")
        self.tv_winners.column("rank", width=50, anchor="w")
        self.tv_winners.column("name", width=420, anchor="w")
        self.tv_winners.column("gpa", width=90, anchor="w")
        attach_sortable_headings(self.tv_winners)

        ttk.Label(self, text="Eligible students (alphabetical)").grid(row=2, column=0, sticky="w", padx=10, pady=(10, 4))

        elig_wrap = ttk.Frame(self, padding=(10, 0))
        elig_wrap.grid(row=3, column=0, sticky="nsew")
        self.tv_eligible = make_tree_with_vscroll(elig_wrap, columns=("name", "gpa"), height=10)
        self.tv_eligible.heading("name", text="Name")
        self.tv_eligible.heading("gpa", text="GPA")
        self.tv_eligible.column("name", width=470, anchor="w")
        self.tv_eligible.column("gpa", width=90, anchor="w")
        attach_sortable_headings(self.tv_eligible)

        ttk.Label(self, textvariable=self.summary_var, padding=10).grid(row=4, column=0, sticky="w")

    def _refresh(self) -> None:
        summary = summarize(self.students, self.settings)

        for tv in (self.tv_winners, self.tv_eligible):
            for iid in tv.get_children():
                tv.delete(iid)

        for i, s in enumerate(summary.winners, start=1):
            self.tv_winners.insert("", tk.END, values=(i, s.name, s.gpa))
        for s in summary.alphabetical:
            self.tv_eligible.insert("", tk.END, values=(s.name, s.gpa))

        self.summary_var.set(
            f"Total eligible (GPA > {summary.gpa_threshold}): {summary.eligible_count}"
            f"    Loaded: {len(self.students)}"
        )

    def _use_sample(self) -> None:
        self.students = load_sample()
        self.source_var.set("Source: built-in sample")
        self._refresh()

    def _load_file(self) -> None:
        result = resolve_students(True, lambda: select_input_source(self))
        for notice in result.notices:
            messagebox.showinfo("Notice", notice)
        self.students = result.students
        self.source_var.set("Source: built-in sample" if result.used_sample else f"Source: {result.source}")
        self._refresh()

    def _visualize(self) -> None:
        if plot_summary is None:
            messagebox.showerror("Unavailable", "matplotlib is not available; cannot plot.")
            return
        try:
            plot_summary(summarize(self.students, self.settings))
        except Exception as e:
            messagebox.showerror("Plot failed", str(e))
