"""
Finetune Studio - orchestration of provider fine-tuning jobs
"""

__version__ = "1.0.0"
