#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Script لتجهيز قاعدة بيانات المتجر: الجداول، حساب المدير، الإعدادات والأصناف الافتراضية
"""

from app import create_app
from models import db
from models.category import Category
from models.settings import StoreSettings
from services.auth import ensure_default_admin

DEFAULT_CATEGORIES = [
    ('Perfumes', 'عطور'),
    ('Incense', 'بخور'),
    ('Accessories', 'إكسسوارات'),
]


def update_database(app):
    """تحديث قاعدة البيانات مع النماذج الحالية"""
    with app.app_context():
        print("🔄 جاري تحديث قاعدة البيانات...")

        # إنشاء جميع الجداول
        db.create_all()
        print("✅ تم إنشاء جميع الجداول بنجاح!")

        admin = ensure_default_admin()
        print(f"✅ حساب المدير: {admin.email}")

        settings = StoreSettings.get_current()
        print(f"✅ إعدادات المتجر: {settings.store_name} (رسوم التوصيل {settings.delivery_fee} {settings.currency})")

        # الأصناف الافتراضية تُضاف فقط إذا كان الجدول فارغاً
        if Category.query.count() == 0:
            print("🗂️  إنشاء الأصناف الافتراضية...")
            for name, name_ar in DEFAULT_CATEGORIES:
                db.session.add(Category(name=name, name_ar=name_ar))
            db.session.commit()
            print("✅ تم إنشاء الأصناف الافتراضية بنجاح!")
        else:
            print(f"✅ يوجد {Category.query.count()} صنف بالفعل")

        print("\n🎉 تم تحديث قاعدة البيانات بنجاح!")
        print("\n🚀 يمكنك الآن تشغيل المتجر!")


if __name__ == "__main__":
    update_database(create_app())
