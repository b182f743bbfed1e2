# accounts/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    email = models.EmailField(unique=True, db_index=True)
    display_name = models.CharField(max_length=120, blank=True)

    @property
    def public_name(self):
        # Falls back to the mailbox part so emails never leak into pot listings
        return self.display_name or self.username or self.email.split("@")[0]

    def __str__(self):
        return self.email
