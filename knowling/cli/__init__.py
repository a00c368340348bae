"""
The Knowling command-line front end.
"""
