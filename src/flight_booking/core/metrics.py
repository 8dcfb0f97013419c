"""
Prometheus metrics for monitoring
"""
import time
from functools import wraps

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# ==================== HTTP Metrics ====================

http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

# ==================== Booking Metrics ====================

tickets_purchased_total = Counter(
    'tickets_purchased_total',
    'Total tickets purchased'
)

tickets_cancelled_total = Counter(
    'tickets_cancelled_total',
    'Total tickets cancelled'
)

seat_conflicts_total = Counter(
    'seat_conflicts_total',
    'Seat operations rejected because the seat was booked',
    ['operation']  # purchase, resize
)

ticket_purchase_duration_seconds = Histogram(
    'ticket_purchase_duration_seconds',
    'Time to run the purchase transaction',
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0]
)

# ==================== Flight Metrics ====================

flights_created_total = Counter(
    'flights_created_total',
    'Total flights created'
)

flight_resizes_total = Counter(
    'flight_resizes_total',
    'Flight seat pool resizes',
    ['direction']  # grow, shrink, none
)

# ==================== Notification Metrics ====================

notifications_total = Counter(
    'notifications_total',
    'Ticket confirmation notifications',
    ['outcome']  # sent, skipped, failed
)

# ==================== Helper Functions ====================

def track_time(metric: Histogram):
    """Decorator to track execution time"""
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return await func(*args, **kwargs)
            finally:
                metric.observe(time.time() - start_time)
        return wrapper
    return decorator


def record_resize(old_total: int, new_total: int):
    if new_total > old_total:
        direction = 'grow'
    elif new_total < old_total:
        direction = 'shrink'
    else:
        direction = 'none'
    flight_resizes_total.labels(direction=direction).inc()


def get_metrics():
    """Get current metrics in Prometheus format"""
    return generate_latest(), CONTENT_TYPE_LATEST
