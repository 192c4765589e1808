from models.suppliers import Supplier
from models.societies import Society
from models.drivers import Driver
from models.vehicles import Vehicle
from models.collections import Collection
from models.deliveries import Delivery
from models.invoices import Invoice, InvoiceItem, InvoiceCounter
from models.payments import Payment
from models.expenses import Expense
from models.driver_attendance import DriverAttendance

__all__ = ['Collection', 'Delivery', 'Driver', 'DriverAttendance', 'Expense', 'Invoice', 'InvoiceCounter', 'InvoiceItem', 'Payment', 'Society', 'Supplier', 'Vehicle',]
