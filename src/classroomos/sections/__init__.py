"""
Reusable console sections and widget helpers shared by the views.
"""
