"""
Bot License Service Django project.
"""
