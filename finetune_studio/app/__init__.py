"""
HTTP boundary for Finetune Studio
"""
