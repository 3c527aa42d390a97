from .instructions import KnittingReport, knitting_instruction, row_instruction

__all__ = ["KnittingReport", "knitting_instruction", "row_instruction"]
