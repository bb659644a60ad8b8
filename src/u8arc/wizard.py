"""
Pack dialog.

Small window with a source folder, an output .arc path and a Pack button.
Packing runs on a background thread; progress lines arrive through app_log.
"""

from __future__ import annotations

import threading
from pathlib import Path
from tkinter import filedialog

import customtkinter as ctk

from u8arc.app_log import app_log, clear_app_log, set_app_log
from u8arc.config_paths import load_settings, remember_paths
from u8arc.errors import ArcError
from u8arc.writer import write_archive

# ---------------------------------------------------------------------------
# Theme constants
# ---------------------------------------------------------------------------
BG_DEEP = "#1a1a1a"
BG_PANEL = "#252526"
ACCENT = "#0078d4"
ACCENT_HOV = "#1084d8"
TEXT_MAIN = "#d4d4d4"
TEXT_DIM = "#858585"

FONT_NORMAL = ("Segoe UI", 14)
FONT_BOLD = ("Segoe UI", 14, "bold")
FONT_SMALL = ("Segoe UI", 12)


class ArcPackWizard(ctk.CTk):
    """Window to pack a folder into a .arc file."""

    def __init__(self, initial_source: Path | None = None, initial_output: Path | None = None):
        super().__init__(fg_color=BG_DEEP)
        self.title("U8 archive packer")
        self.geometry("560x400")
        self.resizable(True, True)
        self.protocol("WM_DELETE_WINDOW", self._on_close)

        settings = load_settings()
        self._source_var = ctk.StringVar(
            value=str(initial_source or settings.get("last_source_dir", ""))
        )
        self._output_var = ctk.StringVar(
            value=str(initial_output or settings.get("last_output_path", ""))
        )
        self._running = False

        self._build()
        set_app_log(self._log, self.after)

    def _on_close(self):
        if self._running:
            return
        clear_app_log()
        self.destroy()

    def _log(self, msg: str):
        self._log_text.configure(state="normal")
        self._log_text.insert("end", msg + "\n")
        self._log_text.see("end")
        self._log_text.configure(state="disabled")

    def _path_row(self, parent, label: str, var: ctk.StringVar, browse) -> None:
        row = ctk.CTkFrame(parent, fg_color="transparent")
        row.pack(fill="x", pady=(0, 8))
        ctk.CTkLabel(
            row, text=label, width=70, anchor="w",
            font=FONT_NORMAL, text_color=TEXT_MAIN,
        ).pack(side="left")
        ctk.CTkEntry(row, textvariable=var, font=FONT_SMALL).pack(
            side="left", fill="x", expand=True, padx=(0, 8)
        )
        ctk.CTkButton(
            row, text="Browse…", width=80, height=28,
            font=FONT_SMALL,
            fg_color=BG_PANEL, hover_color="#3d3d3d", text_color=TEXT_MAIN,
            command=browse,
        ).pack(side="left")

    def _build(self):
        body = ctk.CTkFrame(self, fg_color=BG_DEEP)
        body.pack(fill="both", expand=True, padx=20, pady=20)

        ctk.CTkLabel(
            body,
            text="Pack folder into .arc",
            font=FONT_BOLD,
            text_color=TEXT_MAIN,
        ).pack(pady=(0, 12))

        self._path_row(body, "Source", self._source_var, self._browse_source)
        self._path_row(body, "Output", self._output_var, self._browse_output)

        ctk.CTkButton(
            body,
            text="Pack",
            width=160,
            height=36,
            font=FONT_BOLD,
            fg_color=ACCENT,
            hover_color=ACCENT_HOV,
            text_color="white",
            command=self._do_pack,
        ).pack(pady=(4, 12))

        ctk.CTkLabel(
            body,
            text="Log:",
            font=FONT_SMALL,
            text_color=TEXT_DIM,
        ).pack(anchor="w", pady=(4, 2))

        self._log_text = ctk.CTkTextbox(
            body,
            font=("Consolas", 12),
            fg_color=BG_PANEL,
            text_color=TEXT_MAIN,
            height=160,
            state="disabled",
        )
        self._log_text.pack(fill="both", expand=True)

    def _browse_source(self):
        chosen = filedialog.askdirectory(
            parent=self, title="Folder to pack",
            initialdir=self._source_var.get() or None,
        )
        if chosen:
            self._source_var.set(chosen)
            if not self._output_var.get():
                self._output_var.set(str(Path(chosen).with_suffix(".arc")))

    def _browse_output(self):
        chosen = filedialog.asksaveasfilename(
            parent=self, title="Save archive as",
            defaultextension=".arc",
            filetypes=[("U8 archive", "*.arc"), ("All files", "*")],
        )
        if chosen:
            self._output_var.set(chosen)

    def _do_pack(self):
        if self._running:
            return
        source_str = self._source_var.get().strip()
        output_str = self._output_var.get().strip()
        if not source_str or not output_str:
            self._log("Choose a source folder and an output file first.")
            return
        source = Path(source_str)
        output = Path(output_str)
        self._running = True
        remember_paths(source, output)

        def progress(done: int, total: int):
            if total and (done == total or done % 100 == 0):
                app_log(f"  {done}/{total} file(s)")

        def run():
            try:
                write_archive(output, source, progress_fn=progress)
                app_log("Pack complete.")
            except ArcError as e:
                app_log(f"Error: {e}")
            finally:
                self.after(0, lambda: setattr(self, "_running", False))

        threading.Thread(target=run, daemon=True).start()


def run_wizard(initial_source: Path | None = None, initial_output: Path | None = None) -> None:
    ctk.set_appearance_mode("dark")
    ArcPackWizard(initial_source, initial_output).mainloop()
