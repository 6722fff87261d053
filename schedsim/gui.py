"""
CPU Scheduling Simulator - GUI
==============================

customtkinter front end for the tick-based scheduling engine.

The window lets you:

- Enter processes (name, arrival time, burst time) or load an input file
- Pick a policy (FCFS, preemptive SJF, Round Robin), the runtime and,
  for Round Robin, the time quantum
- See the run as a Gantt chart, the full event trace and a per-process
  metrics table
- Compare all policies on the same process set and save the trace

No scheduling happens here: every run goes through
:func:`schedsim.engine.simulate`.
"""

import logging
import tkinter as tk
from tkinter import filedialog, messagebox, ttk
from typing import Dict, List, Optional

import customtkinter as ctk

from .engine import SimulationResult, simulate
from .errors import SchedulerError
from .metrics import ScheduleEntry, build_schedule, compare_policies, compute_aggregates
from .models import Config, Policy, Process
from .parser import parse_file
from .writer import render_report, write_report

logger = logging.getLogger(__name__)

DEFAULT_RUNTIME = 20
DEFAULT_QUANTUM = 2

# Bright accents on a dark background; idle time is drawn in gray.
COLOR_PALETTE = [
    "#22C55E",  # emerald
    "#3B82F6",  # blue
    "#EAB308",  # amber
    "#EC4899",  # pink
    "#F97316",  # orange
    "#8B5CF6",  # violet
    "#06B6D4",  # cyan
    "#EF4444",  # red
    "#14B8A6",  # teal
]
IDLE_COLOR = "#4B5563"


# ---------------------------------------------------------------------------
# Tooltip helper
# ---------------------------------------------------------------------------


class _ToolTip:
    """Small hover tooltip for Tk / customtkinter widgets."""

    def __init__(self, widget: tk.Widget, text: str) -> None:
        self.widget = widget
        self.text = text
        self._window: Optional[tk.Toplevel] = None
        widget.bind("<Enter>", self._show)
        widget.bind("<Leave>", self._hide)

    def _show(self, _event: tk.Event) -> None:
        if self._window is not None:
            return
        x = self.widget.winfo_rootx() + 20
        y = self.widget.winfo_rooty() + self.widget.winfo_height() + 5
        self._window = tk.Toplevel(self.widget)
        self._window.wm_overrideredirect(True)
        self._window.wm_geometry(f"+{x}+{y}")
        tk.Label(
            self._window,
            text=self.text,
            justify="left",
            background="#111827",
            foreground="#F9FAFB",
            relief="solid",
            borderwidth=1,
            font=("Segoe UI", 9),
            padx=4,
            pady=2,
        ).pack(ipadx=1)

    def _hide(self, _event: tk.Event) -> None:
        if self._window is not None:
            self._window.destroy()
            self._window = None


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


class SchedulerViewerApp:
    """
    customtkinter window around the scheduling engine.

    Layout, top to bottom: process list, run controls, Gantt chart,
    event trace, per-process metrics, policy comparison.
    """

    _POLICY_LABELS: Dict[str, Policy] = {
        "First-Come, First-Served (FCFS)": Policy.FCFS,
        "Shortest Job First, preemptive (SJF)": Policy.SJF,
        "Round Robin (RR)": Policy.RR,
    }

    def __init__(self, root: Optional[ctk.CTk] = None) -> None:
        ctk.set_appearance_mode("dark")
        ctk.set_default_color_theme("dark-blue")

        self.root = root if root is not None else ctk.CTk()
        self.root.title("CPU Scheduling Simulator")
        self.root.geometry("1100x760")

        self._policy_label_var = ctk.StringVar(value=next(iter(self._POLICY_LABELS)))
        self._appearance_var = ctk.StringVar(value="Dark")
        self._next_pid = 1
        self._last_result: Optional[SimulationResult] = None

        self._configure_treeview_style()
        self._build_ui()

    # ------------------------------------------------------------------#
    # Styling                                                           #
    # ------------------------------------------------------------------#

    def _configure_treeview_style(self) -> None:
        style = ttk.Style(self.root)
        try:
            style.theme_use("clam")
        except tk.TclError:
            logger.debug("ttk theme 'clam' not available")

        style.configure(
            "Treeview",
            background="#020617",
            foreground="#E5E7EB",
            fieldbackground="#020617",
            bordercolor="#1F2937",
            rowheight=22,
        )
        style.map("Treeview", background=[("selected", "#1D4ED8")])
        style.configure(
            "Treeview.Heading",
            background="#0F172A",
            foreground="#E5E7EB",
            font=("Segoe UI Semibold", 9),
        )

    def _on_theme_changed(self, mode: str) -> None:
        ctk.set_appearance_mode(mode.lower())
        self._configure_treeview_style()

    # ------------------------------------------------------------------#
    # UI construction                                                   #
    # ------------------------------------------------------------------#

    def _build_ui(self) -> None:
        main_frame = ctk.CTkScrollableFrame(self.root, corner_radius=0, fg_color="transparent")
        main_frame.pack(fill="both", expand=True, padx=16, pady=16)

        header = ctk.CTkFrame(main_frame, fg_color="transparent")
        header.pack(fill="x", pady=(0, 10))
        ctk.CTkLabel(
            header, text="CPU Scheduling Simulator", font=("Segoe UI Semibold", 22)
        ).pack(side="left")
        ctk.CTkSegmentedButton(
            header,
            values=["Dark", "Light"],
            variable=self._appearance_var,
            width=140,
            command=self._on_theme_changed,
        ).pack(side="right")

        self._build_process_section(main_frame)
        self._build_run_section(main_frame)
        self._build_output_section(main_frame)

    def _make_tree(self, parent, columns, headings, height: int) -> ttk.Treeview:
        tree = ttk.Treeview(parent, columns=columns, show="headings", height=height)
        for col, label in zip(columns, headings):
            tree.heading(col, text=label)
            tree.column(col, anchor="center", width=100, stretch=True)
        tree.tag_configure("evenrow", background="#020617")
        tree.tag_configure("oddrow", background="#111827")
        return tree

    def _build_process_section(self, parent: ctk.CTkFrame) -> None:
        frame = ctk.CTkFrame(parent, corner_radius=12)
        frame.pack(fill="x", pady=(0, 10))

        ctk.CTkLabel(frame, text="Processes", font=("Segoe UI Semibold", 13)).grid(
            row=0, column=0, padx=12, pady=(10, 6), sticky="w"
        )

        entries = {}
        for column, label in enumerate(("Name", "Arrival", "Burst")):
            ctk.CTkLabel(frame, text=label).grid(row=1, column=column * 2, padx=(12, 4), pady=4, sticky="e")
            entry = ctk.CTkEntry(frame, width=80)
            entry.grid(row=1, column=column * 2 + 1, padx=4, pady=4, sticky="w")
            entries[label] = entry
        self.name_entry = entries["Name"]
        self.arrival_entry = entries["Arrival"]
        self.burst_entry = entries["Burst"]
        _ToolTip(self.name_entry, "Leave blank to use P1, P2, ...")

        ctk.CTkButton(frame, text="Add Process", width=110, command=self.add_process).grid(
            row=1, column=6, padx=6, pady=4
        )
        ctk.CTkButton(
            frame,
            text="Remove Selected",
            width=130,
            fg_color="#1F2937",
            hover_color="#111827",
            command=self.remove_selected_process,
        ).grid(row=1, column=7, padx=6, pady=4)
        load_button = ctk.CTkButton(frame, text="Load Input File", width=130, command=self.load_input_file)
        load_button.grid(row=1, column=8, padx=6, pady=4)
        _ToolTip(load_button, "Read processes, runtime, policy and quantum\nfrom a .in file.")

        self.process_tree = self._make_tree(
            frame, ("name", "arrival", "burst"), ("Name", "Arrival", "Burst"), height=6
        )
        self.process_tree.grid(row=2, column=0, columnspan=9, sticky="nsew", padx=12, pady=(8, 10))
        for col_index in range(9):
            frame.columnconfigure(col_index, weight=1)

    def _build_run_section(self, parent: ctk.CTkFrame) -> None:
        frame = ctk.CTkFrame(parent, corner_radius=12)
        frame.pack(fill="x", pady=(0, 10))

        ctk.CTkLabel(frame, text="Policy", font=("Segoe UI Semibold", 13)).grid(
            row=0, column=0, padx=12, pady=10, sticky="w"
        )
        ctk.CTkComboBox(
            frame,
            values=list(self._POLICY_LABELS),
            variable=self._policy_label_var,
            width=300,
            state="readonly",
            command=self._on_policy_changed,
        ).grid(row=0, column=1, padx=8, pady=10, sticky="w")

        ctk.CTkLabel(frame, text="Run For").grid(row=0, column=2, padx=(16, 4), pady=10, sticky="e")
        self.runtime_entry = ctk.CTkEntry(frame, width=70)
        self.runtime_entry.insert(0, str(DEFAULT_RUNTIME))
        self.runtime_entry.grid(row=0, column=3, padx=(0, 8), pady=10, sticky="w")

        quantum_label = ctk.CTkLabel(frame, text="Quantum")
        quantum_label.grid(row=0, column=4, padx=(16, 4), pady=10, sticky="e")
        self.quantum_entry = ctk.CTkEntry(frame, width=70)
        self.quantum_entry.insert(0, str(DEFAULT_QUANTUM))
        self.quantum_entry.grid(row=0, column=5, padx=(0, 8), pady=10, sticky="w")
        _ToolTip(quantum_label, "Round Robin only:\nticks a process may run before it is requeued.")

        buttons = ctk.CTkFrame(frame, fg_color="transparent")
        buttons.grid(row=1, column=0, columnspan=6, padx=8, pady=(0, 10), sticky="w")
        for text, command in (
            ("Run Simulation", self.run_simulation),
            ("Compare Policies", self.run_comparison),
            ("Save Trace", self.save_trace),
            ("Clear All", self.clear_all),
        ):
            ctk.CTkButton(buttons, text=text, width=140, command=command).pack(side="left", padx=4)

        self.summary_label = ctk.CTkLabel(
            frame, text="Average Waiting: N/A  |  Average Turnaround: N/A", font=("Segoe UI Semibold", 14)
        )
        self.summary_label.grid(row=2, column=0, columnspan=6, padx=12, pady=(0, 4), sticky="w")
        self.extra_metrics_label = ctk.CTkLabel(
            frame, text="CPU Utilization: N/A  |  Throughput: N/A", font=("Segoe UI", 11)
        )
        self.extra_metrics_label.grid(row=3, column=0, columnspan=6, padx=12, pady=(0, 10), sticky="w")

        self._on_policy_changed(self._policy_label_var.get())

    def _build_output_section(self, parent: ctk.CTkFrame) -> None:
        gantt_frame = ctk.CTkFrame(parent, corner_radius=12)
        gantt_frame.pack(fill="x", pady=(0, 10))
        ctk.CTkLabel(gantt_frame, text="Gantt Chart", font=("Segoe UI Semibold", 13)).pack(
            anchor="w", padx=12, pady=(10, 4)
        )
        self.gantt_canvas = tk.Canvas(gantt_frame, height=120, bg="#020617", highlightthickness=0)
        self.gantt_canvas.pack(fill="x", padx=12, pady=(0, 12))

        trace_frame = ctk.CTkFrame(parent, corner_radius=12)
        trace_frame.pack(fill="x", pady=(0, 10))
        ctk.CTkLabel(trace_frame, text="Trace", font=("Segoe UI Semibold", 13)).pack(
            anchor="w", padx=12, pady=(10, 4)
        )
        self.trace_text = ctk.CTkTextbox(trace_frame, height=200, font=("Consolas", 11))
        self.trace_text.pack(fill="x", padx=12, pady=(0, 12))
        self.trace_text.configure(state="disabled")

        metrics_frame = ctk.CTkFrame(parent, corner_radius=12)
        metrics_frame.pack(fill="x", pady=(0, 10))
        ctk.CTkLabel(metrics_frame, text="Process Metrics", font=("Segoe UI Semibold", 13)).pack(
            anchor="w", padx=12, pady=(10, 4)
        )
        self.results_tree = self._make_tree(
            metrics_frame,
            ("name", "arrival", "burst", "end", "turnaround", "waiting"),
            ("Name", "Arrival", "Burst", "Finished At", "Turnaround", "Waiting"),
            height=8,
        )
        self.results_tree.pack(fill="x", padx=12, pady=(0, 12))

        comparison_frame = ctk.CTkFrame(parent, corner_radius=12)
        comparison_frame.pack(fill="x")
        ctk.CTkLabel(comparison_frame, text="Policy Comparison", font=("Segoe UI Semibold", 13)).pack(
            anchor="w", padx=12, pady=(10, 4)
        )
        self.comparison_tree = self._make_tree(
            comparison_frame,
            ("policy", "avg_waiting", "avg_turnaround", "cpu_util", "unfinished"),
            ("Policy", "Avg Waiting", "Avg Turnaround", "CPU Util (%)", "Unfinished"),
            height=3,
        )
        self.comparison_tree.pack(fill="x", padx=12, pady=(0, 12))

    def _on_policy_changed(self, label: str) -> None:
        """Enable the quantum field only for Round Robin."""
        policy = self._POLICY_LABELS.get(label, Policy.FCFS)
        self.quantum_entry.configure(state="normal" if policy is Policy.RR else "disabled")

    # ------------------------------------------------------------------#
    # Process list                                                      #
    # ------------------------------------------------------------------#

    def _insert_process_row(self, name: str, arrival: int, burst: int) -> None:
        index = len(self.process_tree.get_children())
        tag = "evenrow" if index % 2 == 0 else "oddrow"
        self.process_tree.insert("", "end", values=(name, arrival, burst), tags=(tag,))

    def _restripe(self, tree: ttk.Treeview) -> None:
        for index, item in enumerate(tree.get_children()):
            tree.item(item, tags=("evenrow" if index % 2 == 0 else "oddrow",))

    def add_process(self) -> None:
        """Add a process from the entry fields."""
        name = self.name_entry.get().strip() or f"P{self._next_pid}"
        try:
            arrival = int(self.arrival_entry.get().strip())
            burst = int(self.burst_entry.get().strip())
        except ValueError:
            messagebox.showerror("Invalid input", "Arrival and burst times must be integers.")
            return

        if arrival < 0 or burst <= 0:
            messagebox.showerror("Invalid input", "Arrival time must be >= 0 and burst time must be > 0.")
            return
        if name in (self.process_tree.item(item, "values")[0] for item in self.process_tree.get_children()):
            messagebox.showerror("Invalid input", f"A process named {name!r} already exists.")
            return

        self._next_pid += 1
        self._insert_process_row(name, arrival, burst)
        for entry in (self.name_entry, self.arrival_entry, self.burst_entry):
            entry.delete(0, tk.END)

    def remove_selected_process(self) -> None:
        for item in self.process_tree.selection():
            self.process_tree.delete(item)
        self._restripe(self.process_tree)

    def load_input_file(self) -> None:
        """Replace the current setup with the contents of an input file."""
        path = filedialog.askopenfilename(
            title="Open process description",
            filetypes=[("Scheduler input", "*.in"), ("All files", "*.*")],
        )
        if not path:
            return
        try:
            config = parse_file(path)
        except (SchedulerError, OSError) as exc:
            messagebox.showerror("Could not load file", str(exc))
            return

        self.clear_all()
        for p in config.processes:
            self._insert_process_row(p.name, p.arrival_time, p.burst_time)
        self._next_pid = len(config.processes) + 1

        self.runtime_entry.delete(0, tk.END)
        self.runtime_entry.insert(0, str(config.runtime))
        for label, policy in self._POLICY_LABELS.items():
            if policy is config.policy:
                self._policy_label_var.set(label)
                self._on_policy_changed(label)
        if config.quantum is not None:
            self.quantum_entry.configure(state="normal")
            self.quantum_entry.delete(0, tk.END)
            self.quantum_entry.insert(0, str(config.quantum))
            self._on_policy_changed(self._policy_label_var.get())
        logger.info("Loaded %d processes from %s", len(config.processes), path)

    def clear_all(self) -> None:
        for tree in (self.process_tree, self.results_tree, self.comparison_tree):
            tree.delete(*tree.get_children())
        self.gantt_canvas.delete("all")
        self._set_trace_text("")
        self.summary_label.configure(text="Average Waiting: N/A  |  Average Turnaround: N/A")
        self.extra_metrics_label.configure(text="CPU Utilization: N/A  |  Throughput: N/A")
        self._next_pid = 1
        self._last_result = None

    # ------------------------------------------------------------------#
    # Running                                                           #
    # ------------------------------------------------------------------#

    def _read_config(self, policy: Optional[Policy] = None) -> Optional[Config]:
        """Build a Config from the widgets, or show an error and return None."""
        processes: List[Process] = []
        for item in self.process_tree.get_children():
            name, arrival, burst = self.process_tree.item(item, "values")
            processes.append(Process(name=str(name), arrival_time=int(arrival), burst_time=int(burst)))
        if not processes:
            messagebox.showerror("No processes", "Please add at least one process first.")
            return None

        try:
            runtime = int(self.runtime_entry.get().strip())
        except ValueError:
            messagebox.showerror("Invalid runtime", "Run-for must be an integer number of ticks.")
            return None

        quantum: Optional[int] = None
        quantum_text = self.quantum_entry.get().strip()
        if quantum_text:
            try:
                quantum = int(quantum_text)
            except ValueError:
                messagebox.showerror("Invalid quantum", "Time quantum must be a positive integer.")
                return None

        if policy is None:
            policy = self._POLICY_LABELS[self._policy_label_var.get()]
        return Config(policy=policy, runtime=runtime, processes=processes, quantum=quantum)

    def run_simulation(self) -> None:
        config = self._read_config()
        if config is None:
            return
        try:
            result = simulate(config)
        except SchedulerError as exc:
            messagebox.showerror("Error", str(exc))
            return

        self._last_result = result
        aggregates = compute_aggregates(result)
        self._populate_results_table(result)
        self._draw_gantt_chart(build_schedule(result.timeline))
        self._set_trace_text(render_report(result))

        self.summary_label.configure(
            text=(
                f"Average Waiting: {aggregates['avg_waiting']:.2f}  |  "
                f"Average Turnaround: {aggregates['avg_turnaround']:.2f}"
            )
        )
        self.extra_metrics_label.configure(
            text=(
                f"CPU Utilization: {aggregates['cpu_utilization'] * 100:.2f}%  |  "
                f"Throughput: {aggregates['throughput']:.3f} proc/tick  |  "
                f"Unfinished: {aggregates['unfinished']}"
            )
        )

    def run_comparison(self) -> None:
        config = self._read_config()
        if config is None:
            return
        try:
            rows = compare_policies(config)
        except SchedulerError as exc:
            messagebox.showerror("Error", str(exc))
            return

        self.comparison_tree.delete(*self.comparison_tree.get_children())
        for policy, aggregates in rows:
            self.comparison_tree.insert(
                "",
                "end",
                values=(
                    policy.display_name,
                    f"{aggregates['avg_waiting']:.2f}",
                    f"{aggregates['avg_turnaround']:.2f}",
                    f"{aggregates['cpu_utilization'] * 100:.2f}",
                    aggregates["unfinished"],
                ),
            )
        self._restripe(self.comparison_tree)

    def save_trace(self) -> None:
        if self._last_result is None:
            messagebox.showinfo("Nothing to save", "Run a simulation first.")
            return
        path = filedialog.asksaveasfilename(
            title="Save trace",
            defaultextension=".out",
            filetypes=[("Scheduler output", "*.out"), ("All files", "*.*")],
        )
        if not path:
            return
        try:
            write_report(path, self._last_result)
        except OSError as exc:
            messagebox.showerror("Could not save", str(exc))

    # ------------------------------------------------------------------#
    # Output widgets                                                    #
    # ------------------------------------------------------------------#

    def _set_trace_text(self, text: str) -> None:
        self.trace_text.configure(state="normal")
        self.trace_text.delete("1.0", tk.END)
        self.trace_text.insert("1.0", text)
        self.trace_text.configure(state="disabled")

    def _populate_results_table(self, result: SimulationResult) -> None:
        self.results_tree.delete(*self.results_tree.get_children())
        for p in result.table:
            if p.finished:
                row = (p.name, p.arrival_time, p.burst_time, p.end_time, p.turnaround_time, p.wait_time)
            else:
                row = (p.name, p.arrival_time, p.burst_time, "didn't finish", "-", p.wait_time)
            self.results_tree.insert("", "end", values=row)
        self._restripe(self.results_tree)

    def _draw_gantt_chart(self, schedule: List[ScheduleEntry]) -> None:
        """
        Draw one rectangle per schedule entry, width proportional to its
        duration. Each process keeps one color for the whole chart.
        """
        canvas = self.gantt_canvas
        canvas.delete("all")
        if not schedule:
            canvas.create_text(10, 10, anchor="nw", text="No schedule to display.", fill="#E5E7EB")
            return

        total_time = schedule[-1]["end"]
        canvas_width = canvas.winfo_width()
        if canvas_width <= 1:
            canvas_width = 800

        margin = 20
        bar_top, bar_bottom = 20, 70
        scale = max(1, canvas_width - 2 * margin) / float(total_time)
        colors: Dict[str, str] = {}

        for entry in schedule:
            x1 = margin + entry["start"] * scale
            x2 = margin + entry["end"] * scale
            pid = entry["pid"]
            if pid is None:
                fill, label = IDLE_COLOR, "Idle"
            else:
                fill = colors.setdefault(pid, COLOR_PALETTE[len(colors) % len(COLOR_PALETTE)])
                label = pid

            canvas.create_rectangle(x1, bar_top, x2, bar_bottom, fill=fill, outline="#111827")
            canvas.create_text((x1 + x2) / 2, (bar_top + bar_bottom) / 2, text=label,
                               font=("Segoe UI", 9), fill="#F9FAFB")
            canvas.create_text(x1, bar_bottom + 7, text=str(entry["start"]), anchor="n",
                               font=("Segoe UI", 8), fill="#D1D5DB")

        canvas.create_text(margin + total_time * scale, bar_bottom + 7, text=str(total_time),
                           anchor="n", font=("Segoe UI", 8), fill="#D1D5DB")

    def run(self) -> None:
        self.root.mainloop()


def main() -> None:
    """Entry point for the ``schedsim-gui`` script."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    SchedulerViewerApp().run()


if __name__ == "__main__":
    main()
