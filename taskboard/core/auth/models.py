"""Taskboard Core Auth Models.

User model for Flask-Login, reconstructed from session token claims.
"""
from flask_login import UserMixin


class User(UserMixin):
    """Caller identity for Flask-Login.

    Built from token claims only, so the profile fields reflect the user
    record at login time and can go stale until the next login.
    """

    def __init__(self, claims):
        self.id = claims['id']
        self.email = claims['email']
        self.username = claims.get('username')
        self.firstname = claims.get('firstname')
        self.lastname = claims.get('lastname')
        self.age = claims.get('age')
        self.gender = claims.get('gender')

    def snapshot(self):
        """Author attribution stored on comments."""
        return {
            'id': self.id,
            'firstname': self.firstname,
            'lastname': self.lastname,
            'email': self.email,
            'gender': self.gender,
        }

    def to_claims(self):
        return {
            'id': self.id,
            'email': self.email,
            'username': self.username,
            'firstname': self.firstname,
            'lastname': self.lastname,
            'age': self.age,
            'gender': self.gender,
        }
