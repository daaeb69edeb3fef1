"""
Incentive Distribution Logs

Record-only log of incentives physically handed out to registered farmers
at municipal distribution events. There is no stock, approval or printing:
each entry records what was asked for, what was received and that the
farmer signed for it.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class IncentiveLog(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    farmer = models.ForeignKey(
        'rsbsa.RSBSASubmission',
        on_delete=models.CASCADE,
        related_name='incentive_logs'
    )
    event_date = models.DateField(db_index=True)
    incentive_type = models.CharField(max_length=100, db_index=True)
    qty_requested = models.DecimalField(
        max_digits=12, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    qty_received = models.DecimalField(
        max_digits=12, decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))]
    )
    is_signed = models.BooleanField(default=False, help_text="Farmer signed for the hand-out")
    note = models.TextField(blank=True, max_length=1000)

    encoder = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='incentive_logs_encoded'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'incentive_distribution_logs'
        ordering = ['-event_date', '-created_at']
        indexes = [
            models.Index(fields=['farmer', 'event_date'], name='incentive_farmer_date_idx'),
        ]

    def __str__(self):
        return f"{self.incentive_type} to {self.farmer.full_name} on {self.event_date:%Y-%m-%d}"

    @property
    def shortage(self):
        return self.qty_requested - self.qty_received
