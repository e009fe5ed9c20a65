"""PPTX 媒體瘦身工具：把大型媒體換成佔位圖，並可依 manifest 還原。"""

__version__ = "0.1.0"
