"""loadcal - cognitive load scoring for calendar meetings."""
