from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from tasks.invoice_tasks import run_overdue_sweep
from utils.dates import LOCAL_TZ

scheduler = BackgroundScheduler()

# Schedule to run every day at 11:30 PM local (IST by default)
scheduler.add_job(run_overdue_sweep, CronTrigger(hour=23, minute=30, timezone=LOCAL_TZ), id='overdue_invoices_job')
